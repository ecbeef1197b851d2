"""ipfcodec: Internet Packet Format Codec

A Python library for converting records to and from the packed, fixed-layout
binary format of classic Internet protocol packet diagrams: fixed-width
integers in a chosen byte order, and variable-length strings and sequences
framed by an explicit length prefix.

Key Features:
- Pydantic-based record modeling
- 8/16/32/64-bit length prefixes counting elements or bytes
- Little- and big-endian wire layouts
- Explicit schemas for records without a model class

Quick Start:
    >>> from ipfcodec import Record, U8, U16, U32, LengthPrefixed, from_bytes, to_bytes
    >>>
    >>> class Version(Record):
    ...     size: U32
    ...     typ: U8
    ...     tag: U16
    ...     msize: U32
    ...     version: str = LengthPrefixed("lv16")
    >>>
    >>> msg = Version(size=47, typ=9, tag=15, msize=99, version="muffin")
    >>> data = to_bytes(msg)
    >>> len(data)
    19
    >>> from_bytes(Version, data) == msg
    True
"""

from __future__ import annotations

from .codec import (
    BIG_ENDIAN,
    LITTLE_ENDIAN,
    ByteOrder,
    FieldKind,
    FieldSchema,
    LengthValue,
    LVTag,
    MessageSchema,
    Unit,
    from_bytes,
    from_bytes_be,
    from_bytes_le,
    to_bytes,
    to_bytes_be,
    to_bytes_le,
)
from .exceptions import (
    DecodeError,
    EncodeError,
    InvalidEncoding,
    IpfError,
    LengthOverflow,
    SchemaError,
    TrailingBytes,
    TruncatedInput,
)
from .models import (
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    FixedBytes,
    FixedInt,
    LengthPrefixed,
    NullTerminated,
    Record,
)
from .utils import encoded_size, field_sizes, fixed_size

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Record",
    "to_bytes",
    "to_bytes_le",
    "to_bytes_be",
    "from_bytes",
    "from_bytes_le",
    "from_bytes_be",
    "ByteOrder",
    "LITTLE_ENDIAN",
    "BIG_ENDIAN",
    # Schemas
    "MessageSchema",
    "FieldSchema",
    "FieldKind",
    "LVTag",
    "LengthValue",
    "Unit",
    # Field helpers
    "FixedInt",
    "FixedBytes",
    "LengthPrefixed",
    "NullTerminated",
    "U8",
    "U16",
    "U32",
    "U64",
    "I8",
    "I16",
    "I32",
    "I64",
    # Exceptions
    "IpfError",
    "SchemaError",
    "EncodeError",
    "LengthOverflow",
    "DecodeError",
    "TruncatedInput",
    "TrailingBytes",
    "InvalidEncoding",
    # Sizing
    "encoded_size",
    "field_sizes",
    "fixed_size",
    # Version
    "__version__",
]
