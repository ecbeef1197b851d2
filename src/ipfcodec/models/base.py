"""Base record class and ipfcodec-specific Pydantic configuration.

This module provides the Record class that all ipfcodec records should inherit from.
"""

from __future__ import annotations

from typing import ClassVar, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from ..codec.byteorder import ByteOrder

R = TypeVar("R", bound="Record")


class Record(BaseModel):
    """Base class for all ipfcodec records.

    Fields are encoded in declaration order. Integer fields need a width
    (U8..U64, I8..I64 or FixedInt()), and str/bytes/list fields choose a
    length-value strategy with LengthPrefixed(). A plain ``str`` is
    NUL-terminated; a nested Record is encoded inline.

    ipfcodec-specific options are configured as ClassVar attributes:

    Example:
        >>> class Version(Record):
        ...     size: U32
        ...     typ: U8
        ...     tag: U16
        ...     msize: U32
        ...     version: str = LengthPrefixed("lv16")
        ...
        ...     ipf_byte_order: ClassVar[ByteOrder] = ByteOrder.LITTLE
        ...     ipf_max_bytes: ClassVar[Optional[int]] = 8192

    Attributes:
        ipf_byte_order: Byte order used when none is passed to to_bytes/from_bytes
        ipf_max_bytes: Maximum encoded size in bytes (optional, for validation)
    """

    model_config = ConfigDict(
        # Validate on assignment so a record always holds encodable values
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    ipf_byte_order: ClassVar[ByteOrder] = ByteOrder.LITTLE
    ipf_max_bytes: ClassVar[Optional[int]] = None

    def to_bytes(self, byte_order: ByteOrder | str | None = None) -> bytes:
        """Encode this record. See ipfcodec.to_bytes."""
        from ..codec.encoder import to_bytes

        return to_bytes(self, byte_order)

    @classmethod
    def from_bytes(cls: type[R], data: bytes, byte_order: ByteOrder | str | None = None) -> R:
        """Decode an instance of this record. See ipfcodec.from_bytes."""
        from ..codec.decoder import from_bytes

        return from_bytes(cls, data, byte_order)
