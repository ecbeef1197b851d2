"""Binary encoder for records.

This module provides the to_bytes() function that converts a record (a
Pydantic model instance, or a mapping described by a MessageSchema) to its
packed wire representation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from ..exceptions import EncodeError, LengthOverflow
from .byteorder import ByteOrder
from .bytepack import BytePacker
from .schema import FieldKind, FieldSchema, MessageSchema

logger = logging.getLogger(__name__)


def to_bytes(
    value: Any,
    byte_order: ByteOrder | str | None = None,
    *,
    schema: Optional[MessageSchema] = None,
) -> bytes:
    """Encode a record to its wire representation.

    Fields are encoded in declaration order with no padding or alignment.
    Each field is either a fixed-width integer in the given byte order or a
    block framed by its length-value strategy.

    Args:
        value: Record instance, or a mapping of field name to value
        byte_order: Wire byte order; defaults to the record's ipf_byte_order
        schema: Schema to encode with; required when value is a mapping

    Returns:
        Encoded bytes

    Raises:
        SchemaError: If the record schema is invalid
        LengthOverflow: If variable-length content is too long for its prefix
        EncodeError: If a field value is missing, mistyped or out of range

    Examples:
        ```python
        from ipfcodec import Record, U8, U16, U32, LengthPrefixed, to_bytes

        class Version(Record):
            size: U32
            typ: U8
            tag: U16
            msize: U32
            version: str = LengthPrefixed("lv16")

        msg = Version(size=47, typ=9, tag=15, msize=99, version="muffin")

        data = to_bytes(msg)                # little-endian, 19 bytes
        data = to_bytes(msg, "big")         # big-endian
        ```
    """
    if schema is None:
        if not isinstance(value, BaseModel):
            raise EncodeError(
                f"Cannot infer a schema for {type(value).__name__}; pass schema= explicitly"
            )
        schema = MessageSchema.from_model(type(value))

    order = schema.default_byte_order if byte_order is None else ByteOrder.coerce(byte_order)

    packer = BytePacker()
    encode_record(packer, schema, value, order)
    encoded = packer.to_bytes()

    # Check max_bytes constraint if present
    max_bytes = getattr(schema.model_class, "ipf_max_bytes", None)
    if max_bytes is not None and len(encoded) > max_bytes:
        raise EncodeError(
            f"Encoded record size ({len(encoded)} bytes) exceeds ipf_max_bytes={max_bytes}"
        )

    logger.debug(
        "Encoded %s to %d bytes (%s-endian)", schema.name, len(encoded), order.name.lower()
    )
    return encoded


def to_bytes_le(value: Any, *, schema: Optional[MessageSchema] = None) -> bytes:
    """Encode a record little-endian."""
    return to_bytes(value, ByteOrder.LITTLE, schema=schema)


def to_bytes_be(value: Any, *, schema: Optional[MessageSchema] = None) -> bytes:
    """Encode a record big-endian."""
    return to_bytes(value, ByteOrder.BIG, schema=schema)


def encode_record(
    packer: BytePacker, schema: MessageSchema, value: Any, byte_order: ByteOrder
) -> None:
    """Append every field of a record to the packer, in declared order."""
    for field_schema in schema.fields:
        field_value = _field_value(value, field_schema.name, schema)
        _encode_field(packer, field_schema, field_value, byte_order)


def _field_value(value: Any, name: str, schema: MessageSchema) -> Any:
    if isinstance(value, Mapping):
        try:
            return value[name]
        except KeyError:
            raise EncodeError(f"Record {schema.name}: missing field {name}") from None
    try:
        return getattr(value, name)
    except AttributeError:
        raise EncodeError(f"Record {schema.name}: missing field {name}") from None


def _type_error(field_schema: FieldSchema, expected: str, value: Any) -> EncodeError:
    return EncodeError(
        f"Field {field_schema.name}: expected {expected}, got {type(value).__name__}"
    )


def _encode_field(
    packer: BytePacker, field_schema: FieldSchema, value: Any, byte_order: ByteOrder
) -> None:
    """Encode a single field value.

    Args:
        packer: BytePacker to write to
        field_schema: Schema information for the field
        value: Field value to encode
        byte_order: Byte order for integers and length prefixes

    Raises:
        EncodeError: If value is invalid
        LengthOverflow: If the value is too long for its length prefix
    """
    kind = field_schema.kind

    # Fixed-width integers
    if kind is FieldKind.UINT or kind is FieldKind.INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _type_error(field_schema, "int", value)
        try:
            if kind is FieldKind.UINT:
                packer.write_uint(value, field_schema.bits, byte_order)
            else:
                packer.write_int(value, field_schema.bits, byte_order)
        except ValueError as err:
            raise EncodeError(f"Field {field_schema.name}: {err}") from err
        return

    # Boolean: one byte, 0 or 1
    if kind is FieldKind.BOOL:
        if not isinstance(value, bool):
            raise _type_error(field_schema, "bool", value)
        packer.write_uint(1 if value else 0, 8, byte_order)
        return

    # Nested record: same packer, same byte order
    if kind is FieldKind.RECORD:
        encode_record(packer, field_schema.record, value, byte_order)
        return

    # NUL-terminated string
    if kind is FieldKind.CSTR:
        if not isinstance(value, str):
            raise _type_error(field_schema, "str", value)
        if "\x00" in value:
            raise EncodeError(f"Field {field_schema.name}: NUL-terminated string contains NUL")
        packer.write_bytes(value.encode("utf-8") + b"\x00")
        return

    # Fixed-length bytes
    if kind is FieldKind.FIXED_BYTES:
        if not isinstance(value, (bytes, bytearray)):
            raise _type_error(field_schema, "bytes", value)
        if len(value) != field_schema.length:
            raise EncodeError(
                f"Field {field_schema.name}: expected {field_schema.length} bytes, "
                f"got {len(value)} bytes"
            )
        packer.write_bytes(bytes(value))
        return

    # Length-prefixed kinds
    strategy = field_schema.strategy
    try:
        if kind is FieldKind.STR:
            if not isinstance(value, str):
                raise _type_error(field_schema, "str", value)
            strategy.encode_payload(packer, value.encode("utf-8"), byte_order)
        elif kind is FieldKind.BYTES:
            if not isinstance(value, (bytes, bytearray)):
                raise _type_error(field_schema, "bytes", value)
            strategy.encode_payload(packer, bytes(value), byte_order)
        elif kind is FieldKind.SEQUENCE:
            if not isinstance(value, (list, tuple)):
                raise _type_error(field_schema, "list", value)
            element = field_schema.element

            def encode_item(target: BytePacker, item: Any) -> None:
                _encode_field(target, element, item, byte_order)

            strategy.encode_items(packer, value, encode_item, byte_order)
        else:
            raise EncodeError(f"Field {field_schema.name}: unsupported kind {kind}")
    except LengthOverflow as err:
        raise LengthOverflow(f"Field {field_schema.name}: {err}") from err
