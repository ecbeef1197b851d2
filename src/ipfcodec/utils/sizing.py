"""Record size calculation utilities.

This module provides functions to calculate the encoded size of records.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from ..codec.byteorder import ByteOrder
from ..codec.bytepack import BytePacker
from ..codec.encoder import encode_record, to_bytes
from ..codec.schema import MessageSchema


def _schema(target: Any, schema: Optional[MessageSchema] = None) -> MessageSchema:
    if schema is not None:
        return schema
    if isinstance(target, MessageSchema):
        return target
    if isinstance(target, BaseModel):
        return MessageSchema.from_model(type(target))
    return MessageSchema.from_model(target)


def fixed_size(target: MessageSchema | BaseModel | type[BaseModel]) -> Optional[int]:
    """Calculate the encoded size of a record type that has no variable-length fields.

    Args:
        target: Record instance, record class or MessageSchema

    Returns:
        Size in bytes, or None if any field is length-prefixed or NUL-terminated

    Example:
        >>> class Header(Record):
        ...     size: U32
        ...     typ: U8
        ...     tag: U16
        >>> fixed_size(Header)
        7
    """
    return _schema(target).fixed_size()


def encoded_size(
    value: Any,
    byte_order: ByteOrder | str | None = None,
    *,
    schema: Optional[MessageSchema] = None,
) -> int:
    """Calculate the encoded size of a record value in bytes.

    Raises:
        EncodeError: If the value cannot be encoded
    """
    return len(to_bytes(value, byte_order, schema=schema))


def field_sizes(value: Any, *, schema: Optional[MessageSchema] = None) -> dict[str, int]:
    """Get the encoded size in bytes of each field of a record value.

    Byte order does not affect sizes, so fields are measured little-endian.

    Example:
        >>> field_sizes(Version(size=47, typ=9, tag=15, msize=99, version="muffin"))
        {'size': 4, 'typ': 1, 'tag': 2, 'msize': 4, 'version': 8}
    """
    schema = _schema(value, schema)
    sizes = {}
    for field_schema in schema.fields:
        packer = BytePacker()
        single = MessageSchema(schema.name, (field_schema,))
        encode_record(packer, single, value, ByteOrder.LITTLE)
        sizes[field_schema.name] = len(packer)
    return sizes
