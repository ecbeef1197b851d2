"""Packed binary codec for ipfcodec.

This module provides encoding and decoding between records and their
fixed-layout wire representation.
"""

from __future__ import annotations

from .byteorder import BIG_ENDIAN, LITTLE_ENDIAN, ByteOrder
from .decoder import from_bytes, from_bytes_be, from_bytes_le
from .encoder import to_bytes, to_bytes_be, to_bytes_le
from .lv import LengthValue, LVTag, Unit
from .schema import FieldKind, FieldSchema, MessageSchema

__all__ = [
    "to_bytes",
    "to_bytes_le",
    "to_bytes_be",
    "from_bytes",
    "from_bytes_le",
    "from_bytes_be",
    "ByteOrder",
    "LITTLE_ENDIAN",
    "BIG_ENDIAN",
    "LVTag",
    "LengthValue",
    "Unit",
    "MessageSchema",
    "FieldSchema",
    "FieldKind",
]
