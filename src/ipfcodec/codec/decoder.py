"""Binary decoder for records.

This module provides the from_bytes() function that converts wire data
back to a record instance (or a dict, for schemas without a model class).
"""

from __future__ import annotations

import logging
from typing import Any, Type, TypeVar, Union, overload

from pydantic import BaseModel, ValidationError

from ..exceptions import InvalidEncoding, SchemaError, TrailingBytes
from .byteorder import ByteOrder
from .bytepack import ByteUnpacker
from .schema import FieldKind, FieldSchema, MessageSchema

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@overload
def from_bytes(target: Type[T], data: bytes, byte_order: ByteOrder | str | None = None) -> T: ...


@overload
def from_bytes(
    target: MessageSchema, data: bytes, byte_order: ByteOrder | str | None = None
) -> Any: ...


def from_bytes(
    target: Union[Type[T], MessageSchema],
    data: bytes,
    byte_order: ByteOrder | str | None = None,
) -> Any:
    """Decode wire data to a record.

    Fields are decoded in the same order and layout they were encoded in.
    The whole input must be consumed.

    Args:
        target: Record class to decode to, or a MessageSchema
        data: Binary data to decode
        byte_order: Wire byte order; defaults to the record's ipf_byte_order

    Returns:
        Decoded record instance; a dict when target is a schema without a model class

    Raises:
        SchemaError: If the record schema is invalid
        TruncatedInput: If the data ends before a field or length prefix is complete
        TrailingBytes: If bytes remain after the record
        InvalidEncoding: If the data is structurally invalid

    Examples:
        ```python
        from ipfcodec import from_bytes, to_bytes

        data = to_bytes(msg)
        decoded = from_bytes(Version, data)
        assert decoded == msg
        ```
    """
    if isinstance(target, MessageSchema):
        schema = target
    elif isinstance(target, type) and issubclass(target, BaseModel):
        schema = MessageSchema.from_model(target)
    else:
        raise SchemaError(
            f"Cannot decode to {target!r}: expected a record class or MessageSchema"
        )

    order = schema.default_byte_order if byte_order is None else ByteOrder.coerce(byte_order)

    unpacker = ByteUnpacker(data)
    value = decode_record(unpacker, schema, order)

    remaining = unpacker.bytes_remaining()
    if remaining:
        raise TrailingBytes(
            f"{remaining} unexpected trailing bytes after {schema.name} "
            f"(consumed {unpacker.position()} of {len(data)})"
        )

    logger.debug(
        "Decoded %s from %d bytes (%s-endian)", schema.name, len(data), order.name.lower()
    )
    return value


def from_bytes_le(target: Union[Type[T], MessageSchema], data: bytes) -> Any:
    """Decode little-endian wire data."""
    return from_bytes(target, data, ByteOrder.LITTLE)


def from_bytes_be(target: Union[Type[T], MessageSchema], data: bytes) -> Any:
    """Decode big-endian wire data."""
    return from_bytes(target, data, ByteOrder.BIG)


def decode_record(unpacker: ByteUnpacker, schema: MessageSchema, byte_order: ByteOrder) -> Any:
    """Read every field of a record from the unpacker, in declared order."""
    field_values: dict[str, Any] = {}
    for field_schema in schema.fields:
        field_values[field_schema.name] = _decode_field(unpacker, field_schema, byte_order)

    if schema.model_class is None:
        return field_values

    try:
        return schema.model_class(**field_values)
    except ValidationError as e:
        raise InvalidEncoding(f"Failed to construct {schema.name}: {e}") from e


def _decode_text(field_schema: FieldSchema, raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding(f"Field {field_schema.name}: invalid UTF-8 encoding: {e}") from e


def _decode_field(unpacker: ByteUnpacker, field_schema: FieldSchema, byte_order: ByteOrder) -> Any:
    """Decode a single field value.

    Args:
        unpacker: ByteUnpacker to read from
        field_schema: Schema information for the field
        byte_order: Byte order for integers and length prefixes

    Returns:
        Decoded field value

    Raises:
        TruncatedInput: If data is truncated
        InvalidEncoding: If data is invalid
    """
    kind = field_schema.kind

    if kind is FieldKind.UINT:
        return unpacker.read_uint(field_schema.bits, byte_order)

    if kind is FieldKind.INT:
        return unpacker.read_int(field_schema.bits, byte_order)

    if kind is FieldKind.BOOL:
        raw = unpacker.read_uint(8, byte_order)
        if raw > 1:
            raise InvalidEncoding(f"Field {field_schema.name}: invalid boolean byte 0x{raw:02x}")
        return raw == 1

    if kind is FieldKind.RECORD:
        return decode_record(unpacker, field_schema.record, byte_order)

    if kind is FieldKind.CSTR:
        return _decode_text(field_schema, unpacker.read_until(0))

    if kind is FieldKind.FIXED_BYTES:
        return unpacker.read_bytes(field_schema.length)

    if kind is FieldKind.STR:
        raw = field_schema.strategy.decode_payload(unpacker, byte_order)
        return _decode_text(field_schema, raw)

    if kind is FieldKind.BYTES:
        return field_schema.strategy.decode_payload(unpacker, byte_order)

    if kind is FieldKind.SEQUENCE:
        element = field_schema.element

        def decode_item(source: ByteUnpacker) -> Any:
            return _decode_field(source, element, byte_order)

        # Every element occupies at least one byte; fixed-size ones exactly their size
        item_size = element.fixed_size() or 1
        return field_schema.strategy.decode_items(unpacker, decode_item, byte_order, item_size)

    raise SchemaError(f"Field {field_schema.name}: unsupported kind {kind}")
