"""Byte-level packing and unpacking utilities.

This module provides the output buffer and read cursor used by the codec,
together with the fixed-width integer primitives every other part of the
codec is built on. Integers are 8, 16, 32 or 64 bits wide and laid out in
the byte order passed to each call.
"""

from __future__ import annotations

import struct

from ..exceptions import TruncatedInput
from .byteorder import ByteOrder

# struct format characters per width, unsigned
_UINT_FORMATS = {8: "B", 16: "H", 32: "I", 64: "Q"}

SUPPORTED_WIDTHS = tuple(_UINT_FORMATS)


def _format(bits: int, signed: bool, byte_order: ByteOrder) -> str:
    try:
        code = _UINT_FORMATS[bits]
    except KeyError:
        raise ValueError(f"bits must be one of {SUPPORTED_WIDTHS}, got {bits}") from None
    return byte_order.prefix + (code.lower() if signed else code)


def uint_range(bits: int) -> tuple[int, int]:
    """Return the inclusive (min, max) of an unsigned integer of ``bits`` width."""
    return 0, (1 << bits) - 1


def int_range(bits: int) -> tuple[int, int]:
    """Return the inclusive (min, max) of a two's complement integer of ``bits`` width."""
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


class BytePacker:
    """Append-only output buffer.

    Example:
        >>> packer = BytePacker()
        >>> packer.write_uint(47, 32, ByteOrder.LITTLE)
        >>> packer.write_uint(9, 8, ByteOrder.LITTLE)
        >>> packer.to_bytes()
        b'/\\x00\\x00\\x00\\t'
    """

    def __init__(self) -> None:
        """Initialize an empty packer."""
        self._buffer = bytearray()

    def write_uint(self, value: int, bits: int, byte_order: ByteOrder) -> None:
        """Write an unsigned integer of the given width.

        Args:
            value: Unsigned integer value to write
            bits: Width in bits (8, 16, 32 or 64)
            byte_order: Byte order of the written bytes

        Raises:
            ValueError: If value is negative or doesn't fit in bits
        """
        fmt = _format(bits, False, byte_order)
        if value < 0:
            raise ValueError(f"write_uint requires non-negative value, got {value}")
        _, high = uint_range(bits)
        if value > high:
            raise ValueError(f"Value {value} requires more than {bits} bits (max: {high})")
        self._buffer += struct.pack(fmt, value)

    def write_int(self, value: int, bits: int, byte_order: ByteOrder) -> None:
        """Write a signed integer using two's complement encoding.

        Raises:
            ValueError: If value doesn't fit in bits using two's complement
        """
        fmt = _format(bits, True, byte_order)
        low, high = int_range(bits)
        if value < low or value > high:
            raise ValueError(f"Value {value} doesn't fit in {bits} bits (range: {low} to {high})")
        self._buffer += struct.pack(fmt, value)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes."""
        self._buffer += data

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the buffer contents as immutable bytes."""
        return bytes(self._buffer)


class ByteUnpacker:
    """Read cursor over an immutable byte buffer.

    The cursor tracks an offset and a limit. Every read advances the offset
    and never crosses the limit; a short read raises TruncatedInput and
    leaves the cursor where it was.

    Example:
        >>> unpacker = ByteUnpacker(b"\\x04\\x03\\x02\\x01")
        >>> hex(unpacker.read_uint(32, ByteOrder.LITTLE))
        '0x1020304'
    """

    def __init__(self, data: bytes | memoryview, start: int = 0, end: int | None = None) -> None:
        """Initialize a cursor over ``data[start:end]``.

        Args:
            data: Buffer to read from
            start: Offset of the first readable byte
            end: Offset one past the last readable byte (defaults to len(data))
        """
        self._data = data if isinstance(data, memoryview) else memoryview(data)
        self._position = start
        self._end = len(self._data) if end is None else end

    def _advance(self, count: int, what: str) -> int:
        start = self._position
        if count > self._end - start:
            raise TruncatedInput(
                f"Not enough bytes for {what}: need {count}, have {self._end - start}"
            )
        self._position = start + count
        return start

    def read_uint(self, bits: int, byte_order: ByteOrder) -> int:
        """Read an unsigned integer of the given width.

        Raises:
            ValueError: If bits is not a supported width
            TruncatedInput: If not enough bytes are available
        """
        fmt = _format(bits, False, byte_order)
        start = self._advance(bits // 8, f"{bits}-bit integer")
        return struct.unpack_from(fmt, self._data, start)[0]

    def read_int(self, bits: int, byte_order: ByteOrder) -> int:
        """Read a signed two's complement integer of the given width."""
        fmt = _format(bits, True, byte_order)
        start = self._advance(bits // 8, f"{bits}-bit integer")
        return struct.unpack_from(fmt, self._data, start)[0]

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes.

        Raises:
            TruncatedInput: If not enough bytes are available
        """
        start = self._advance(num_bytes, f"{num_bytes}-byte block")
        return bytes(self._data[start : start + num_bytes])

    def read_until(self, terminator: int) -> bytes:
        """Read bytes up to ``terminator`` and consume the terminator too.

        Raises:
            TruncatedInput: If the terminator does not occur before the limit
        """
        for index in range(self._position, self._end):
            if self._data[index] == terminator:
                data = bytes(self._data[self._position : index])
                self._position = index + 1
                return data
        raise TruncatedInput(f"Terminator 0x{terminator:02x} not found before end of input")

    def take(self, num_bytes: int) -> ByteUnpacker:
        """Carve a sub-cursor over the next ``num_bytes`` and skip past them.

        Raises:
            TruncatedInput: If not enough bytes are available
        """
        start = self._advance(num_bytes, f"{num_bytes}-byte block")
        return ByteUnpacker(self._data, start, start + num_bytes)

    def bytes_remaining(self) -> int:
        """Return the number of unread bytes."""
        return self._end - self._position

    def position(self) -> int:
        """Return the current read offset."""
        return self._position
