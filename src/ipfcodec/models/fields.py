"""Field type helpers and utilities.

This module provides convenience functions and type aliases for declaring
the wire layout of record fields. The helpers return Pydantic FieldInfo
objects; the layout travels in ``json_schema_extra`` and is read back when
the record's schema is built.
"""

from __future__ import annotations

from typing import Annotated, Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.bytepack import SUPPORTED_WIDTHS, int_range, uint_range
from ..codec.lv import LVTag, resolve


def FixedInt(*, bits: int, signed: bool = False, **kwargs: Any) -> FieldInfo:
    """Create a fixed-width integer field.

    The value range of the width is applied as ge=/le= constraints, so
    Pydantic rejects values that cannot be encoded.

    Args:
        bits: Width in bits (8, 16, 32 or 64)
        signed: Whether the integer is two's complement signed (default False)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Header(Record):
        ...     tag: int = FixedInt(bits=16)
        ...     offset: Annotated[int, FixedInt(bits=64, signed=True)]
    """
    if bits not in SUPPORTED_WIDTHS:
        raise ValueError(f"bits must be one of {SUPPORTED_WIDTHS}, got {bits}")
    low, high = int_range(bits) if signed else uint_range(bits)
    return cast(
        FieldInfo,
        Field(ge=low, le=high, json_schema_extra={"bits": bits, "signed": signed}, **kwargs),
    )


def LengthPrefixed(lv: LVTag | str, **kwargs: Any) -> FieldInfo:
    """Create a length-prefixed str, bytes or list field.

    Args:
        lv: Length-value strategy, e.g. ``"lv16"`` (16-bit element count) or
            ``"lv32b"`` (32-bit byte count)
        **kwargs: Additional Field() arguments

    Example:
        >>> class Dirent(Record):
        ...     name: str = LengthPrefixed("lv16")
        >>> class Rreaddir(Record):
        ...     data: list[Dirent] = LengthPrefixed(LVTag.LV32B)
    """
    resolve(lv)
    return cast(FieldInfo, Field(json_schema_extra={"lv": LVTag(lv).value}, **kwargs))


def NullTerminated(**kwargs: Any) -> FieldInfo:
    """Create a NUL-terminated string field.

    This is also the layout of a plain ``str`` field with no metadata. Only
    valid on ``str`` fields, and not together with LengthPrefixed().
    """
    return cast(FieldInfo, Field(json_schema_extra={"cstr": True}, **kwargs))


def FixedBytes(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length bytes field with no length prefix.

    Args:
        length: Exact length in bytes
        **kwargs: Additional Field() arguments

    Example:
        >>> class Qid(Record):
        ...     digest: bytes = FixedBytes(length=13)
    """
    return cast(
        FieldInfo,
        Field(
            min_length=length,
            max_length=length,
            json_schema_extra={"length": length},
            **kwargs,
        ),
    )


U8 = Annotated[int, FixedInt(bits=8)]
U16 = Annotated[int, FixedInt(bits=16)]
U32 = Annotated[int, FixedInt(bits=32)]
U64 = Annotated[int, FixedInt(bits=64)]
I8 = Annotated[int, FixedInt(bits=8, signed=True)]
I16 = Annotated[int, FixedInt(bits=16, signed=True)]
I32 = Annotated[int, FixedInt(bits=32, signed=True)]
I64 = Annotated[int, FixedInt(bits=64, signed=True)]
