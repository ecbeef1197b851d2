"""Byte order selection."""

from __future__ import annotations

import enum


class ByteOrder(enum.Enum):
    """Wire byte order for multi-byte integers, length prefixes included."""

    LITTLE = "<"
    BIG = ">"

    @property
    def prefix(self) -> str:
        """struct format prefix for this byte order."""
        return self.value

    @classmethod
    def coerce(cls, value: ByteOrder | str) -> ByteOrder:
        """Accept a ByteOrder or one of 'little'/'big'."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Invalid byte order: {value!r}. Must be 'little' or 'big'") from None


LITTLE_ENDIAN = ByteOrder.LITTLE
BIG_ENDIAN = ByteOrder.BIG
