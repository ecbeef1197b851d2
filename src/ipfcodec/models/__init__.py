"""Pydantic record modeling for ipfcodec.

This module provides the Record class and field utilities for declaring
packet layouts using Pydantic.
"""

from __future__ import annotations

from .base import Record
from .fields import (
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
)

__all__ = [
    "Record",
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
]
