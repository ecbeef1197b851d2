"""Record schemas.

A MessageSchema is the ordered field list the codec walks. It can be built
by hand from FieldSchema descriptors, or derived once per class from a
Pydantic model whose fields carry ipfcodec metadata (see ipfcodec.models).
Field order is wire order.
"""

from __future__ import annotations

import enum
import inspect
import logging
import types
from dataclasses import dataclass, field
from typing import Annotated, Any, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from .byteorder import ByteOrder
from .bytepack import SUPPORTED_WIDTHS
from .lv import LengthValue, LVTag, resolve

logger = logging.getLogger(__name__)


class FieldKind(enum.Enum):
    """How a field is laid out on the wire."""

    UINT = "uint"
    INT = "int"
    BOOL = "bool"
    BYTES = "bytes"
    STR = "str"
    CSTR = "cstr"
    FIXED_BYTES = "fixed_bytes"
    SEQUENCE = "sequence"
    RECORD = "record"


_LV_KINDS = (FieldKind.BYTES, FieldKind.STR, FieldKind.SEQUENCE)


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        kind: Wire layout of the field
        bits: Integer width for UINT/INT fields
        lv: Length-value strategy tag for BYTES/STR/SEQUENCE fields
        length: Exact byte count for FIXED_BYTES fields
        element: Element schema for SEQUENCE fields
        record: Nested schema for RECORD fields
    """

    name: str
    kind: FieldKind
    bits: Optional[int] = None
    lv: Optional[LVTag] = None
    length: Optional[int] = None
    element: Optional[FieldSchema] = None
    record: Optional[MessageSchema] = None

    def __post_init__(self) -> None:
        if self.kind in (FieldKind.UINT, FieldKind.INT) and self.bits not in SUPPORTED_WIDTHS:
            raise SchemaError(
                f"Field {self.name}: integer width must be one of {SUPPORTED_WIDTHS}, "
                f"got {self.bits}"
            )
        if self.kind in _LV_KINDS:
            if self.lv is None:
                raise SchemaError(
                    f"Field {self.name}: {self.kind.value} requires a length-value strategy"
                )
            resolve(self.lv)
            object.__setattr__(self, "lv", LVTag(self.lv))
        if self.kind is FieldKind.FIXED_BYTES and (self.length is None or self.length < 0):
            raise SchemaError(f"Field {self.name}: fixed bytes require a non-negative length")
        if self.kind is FieldKind.SEQUENCE:
            if self.element is None:
                raise SchemaError(f"Field {self.name}: sequence requires an element schema")
            if self.element.fixed_size() == 0:
                # Zero-width elements leave no trace in the count or in the block
                raise SchemaError(
                    f"Field {self.name}: sequence elements must occupy at least one byte"
                )
        if self.kind is FieldKind.RECORD and self.record is None:
            raise SchemaError(f"Field {self.name}: record field requires a nested schema")

    @classmethod
    def uint(cls, name: str, bits: int) -> FieldSchema:
        return cls(name, FieldKind.UINT, bits=bits)

    @classmethod
    def sint(cls, name: str, bits: int) -> FieldSchema:
        return cls(name, FieldKind.INT, bits=bits)

    @classmethod
    def boolean(cls, name: str) -> FieldSchema:
        return cls(name, FieldKind.BOOL)

    @classmethod
    def string(cls, name: str, lv: LVTag | str) -> FieldSchema:
        return cls(name, FieldKind.STR, lv=lv)

    @classmethod
    def cstring(cls, name: str) -> FieldSchema:
        return cls(name, FieldKind.CSTR)

    @classmethod
    def octets(cls, name: str, lv: LVTag | str) -> FieldSchema:
        return cls(name, FieldKind.BYTES, lv=lv)

    @classmethod
    def fixed(cls, name: str, length: int) -> FieldSchema:
        return cls(name, FieldKind.FIXED_BYTES, length=length)

    @classmethod
    def sequence(cls, name: str, lv: LVTag | str, element: FieldSchema) -> FieldSchema:
        return cls(name, FieldKind.SEQUENCE, lv=lv, element=element)

    @classmethod
    def nested(cls, name: str, record: MessageSchema) -> FieldSchema:
        return cls(name, FieldKind.RECORD, record=record)

    @property
    def strategy(self) -> LengthValue:
        """The length-value strategy bound to this field."""
        if self.lv is None:
            raise SchemaError(f"Field {self.name}: {self.kind.value} has no length-value strategy")
        return resolve(self.lv)

    def fixed_size(self) -> Optional[int]:
        """Return the encoded size in bytes, or None if it depends on the value."""
        if self.kind in (FieldKind.UINT, FieldKind.INT):
            return self.bits // 8
        if self.kind is FieldKind.BOOL:
            return 1
        if self.kind is FieldKind.FIXED_BYTES:
            return self.length
        if self.kind is FieldKind.RECORD:
            return self.record.fixed_size()
        return None


@dataclass(frozen=True)
class MessageSchema:
    """Ordered field list of a record type.

    Example:
        >>> schema = MessageSchema("Version", [
        ...     FieldSchema.uint("size", 32),
        ...     FieldSchema.uint("typ", 8),
        ...     FieldSchema.string("version", "lv16"),
        ... ])
        >>> [f.name for f in schema.fields]
        ['size', 'typ', 'version']
    """

    name: str
    fields: tuple[FieldSchema, ...]
    model_class: Optional[Type[BaseModel]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        seen: set[str] = set()
        for f in fields:
            if f.name in seen:
                raise SchemaError(f"Record {self.name}: duplicate field {f.name}")
            seen.add(f.name)
        object.__setattr__(self, "fields", fields)

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> MessageSchema:
        """Return the schema of a Pydantic model class.

        The schema is built on first use and cached per class.

        Raises:
            SchemaError: If a field cannot be mapped to a wire layout
        """
        return _schema_for_model(model_class)

    @property
    def default_byte_order(self) -> ByteOrder:
        """Byte order declared by the model class, little-endian otherwise."""
        return getattr(self.model_class, "ipf_byte_order", ByteOrder.LITTLE)

    def fixed_size(self) -> Optional[int]:
        """Return the encoded size in bytes, or None if any field is variable-length."""
        total = 0
        for f in self.fields:
            size = f.fixed_size()
            if size is None:
                return None
            total += size
        return total


_CACHE_ATTR = "__ipf_schema__"


def _schema_for_model(model_class: Type[BaseModel]) -> MessageSchema:
    # Stored on the class itself so the schema lives and dies with it
    schema = model_class.__dict__.get(_CACHE_ATTR)
    if schema is None:
        schema = _build_schema(model_class, ())
        setattr(model_class, _CACHE_ATTR, schema)
        logger.debug(
            "Built schema for %s with %d fields", model_class.__name__, len(schema.fields)
        )
    return schema


def _build_schema(model_class: Type[BaseModel], parents: tuple[type, ...]) -> MessageSchema:
    if model_class in parents:
        raise SchemaError(f"Record {model_class.__name__} contains itself")
    parents = parents + (model_class,)
    fields = []
    for name, field_info in model_class.model_fields.items():
        if field_info.annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")
        extra = _extra(field_info)
        fields.append(_describe(name, field_info.annotation, extra, parents))
    return MessageSchema(model_class.__name__, tuple(fields), model_class)


def _extra(*infos: Any) -> dict[str, Any]:
    """Collect ipfcodec metadata from FieldInfo objects."""
    extra: dict[str, Any] = {}
    for info in infos:
        if isinstance(info, FieldInfo) and isinstance(info.json_schema_extra, dict):
            extra.update(info.json_schema_extra)
    return extra


def _unwrap(annotation: Any, extra: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
    """Strip Annotated[...] and merge the metadata it carries."""
    while get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        extra = {**_extra(*metadata), **extra}
        annotation = base
    return annotation, extra


def _describe(
    name: str, annotation: Any, extra: dict[str, Any], parents: tuple[type, ...]
) -> FieldSchema:
    annotation, extra = _unwrap(annotation, extra)
    origin = get_origin(annotation)

    if origin is Union or origin is types.UnionType:
        raise SchemaError(f"Field {name}: Optional and Union types are not supported")

    if extra.get("cstr"):
        if annotation is not str:
            raise SchemaError(f"Field {name}: NullTerminated() applies only to str fields")
        if "lv" in extra:
            raise SchemaError(
                f"Field {name}: NullTerminated() and LengthPrefixed() are mutually exclusive"
            )
        return FieldSchema.cstring(name)

    if annotation is bool:
        return FieldSchema.boolean(name)

    if annotation is int:
        if "bits" not in extra:
            raise SchemaError(
                f"Field {name}: integer fields require a width, e.g. U32 or FixedInt(bits=32)"
            )
        kind = FieldKind.INT if extra.get("signed") else FieldKind.UINT
        return FieldSchema(name, kind, bits=extra["bits"])

    if annotation is str:
        if "lv" in extra:
            return FieldSchema.string(name, extra["lv"])
        return FieldSchema.cstring(name)

    if annotation is bytes:
        if "lv" in extra:
            return FieldSchema.octets(name, extra["lv"])
        if "length" in extra:
            return FieldSchema.fixed(name, extra["length"])
        raise SchemaError(f"Field {name}: bytes require LengthPrefixed() or FixedBytes()")

    if origin is list:
        args = get_args(annotation)
        if "lv" not in extra:
            raise SchemaError(f"Field {name}: sequences require LengthPrefixed()")
        if not args:
            raise SchemaError(f"Field {name}: sequences must declare an element type")
        element = _describe(f"{name}[]", args[0], {}, parents)
        return FieldSchema.sequence(name, extra["lv"], element)

    if inspect.isclass(annotation) and issubclass(annotation, BaseModel):
        return FieldSchema.nested(name, _build_schema(annotation, parents))

    raise SchemaError(
        f"Field {name}: unsupported type {annotation}. "
        f"Supported: fixed-width int, bool, str, bytes, list, nested records."
    )

