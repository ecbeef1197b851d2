"""Length-value strategies for variable-length fields.

A length-value (LV) field is a fixed-width integer prefix followed by the
content it describes. Eight strategies are offered, one per combination of
prefix width (8, 16, 32 or 64 bits) and prefix unit:

- count-unit (``lv8`` .. ``lv64``): the prefix is the number of elements.
  For strings and byte strings this is the payload byte count.
- byte-unit (``lv8b`` .. ``lv64b``): the prefix is the total encoded byte
  length of the elements. Encoding goes through a scratch buffer so the
  length is known before the prefix is written.

The prefix is encoded in the same byte order as the rest of the record.
Strategies hold no state; a tag resolves to a shared frozen instance.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from ..exceptions import InvalidEncoding, LengthOverflow, SchemaError, TrailingBytes, TruncatedInput
from .byteorder import ByteOrder
from .bytepack import BytePacker, ByteUnpacker, uint_range

ItemEncoder = Callable[[BytePacker, Any], None]
ItemDecoder = Callable[[ByteUnpacker], Any]


class Unit(enum.Enum):
    """What a length prefix counts."""

    COUNT = "count"
    BYTES = "bytes"


class LVTag(str, enum.Enum):
    """Selector for one of the eight length-value strategies."""

    LV8 = "lv8"
    LV16 = "lv16"
    LV32 = "lv32"
    LV64 = "lv64"
    LV8B = "lv8b"
    LV16B = "lv16b"
    LV32B = "lv32b"
    LV64B = "lv64b"


@dataclass(frozen=True)
class LengthValue:
    """A length-value strategy.

    Attributes:
        prefix_bits: Width of the length prefix (8, 16, 32 or 64)
        unit: Whether the prefix counts elements or encoded bytes
    """

    prefix_bits: int
    unit: Unit

    @property
    def max_length(self) -> int:
        """Largest length the prefix can represent."""
        return uint_range(self.prefix_bits)[1]

    def _write_prefix(self, packer: BytePacker, length: int, byte_order: ByteOrder) -> None:
        if length > self.max_length:
            raise LengthOverflow(
                f"Length {length} exceeds {self.prefix_bits}-bit prefix (max: {self.max_length})"
            )
        packer.write_uint(length, self.prefix_bits, byte_order)

    def encode_payload(self, packer: BytePacker, payload: bytes, byte_order: ByteOrder) -> None:
        """Write a byte payload preceded by its length.

        Count and byte units coincide for byte payloads.

        Raises:
            LengthOverflow: If the payload is too long for the prefix
        """
        self._write_prefix(packer, len(payload), byte_order)
        packer.write_bytes(payload)

    def decode_payload(self, unpacker: ByteUnpacker, byte_order: ByteOrder) -> bytes:
        """Read a length prefix and then that many payload bytes.

        Raises:
            TruncatedInput: If the prefix or the payload is cut short
        """
        length = unpacker.read_uint(self.prefix_bits, byte_order)
        return unpacker.read_bytes(length)

    def encode_items(
        self,
        packer: BytePacker,
        items: Sequence[Any],
        encode_item: ItemEncoder,
        byte_order: ByteOrder,
    ) -> None:
        """Write a sequence of elements preceded by its length.

        Args:
            packer: Buffer to append to
            items: Elements to encode
            encode_item: Callback that encodes one element into a packer
            byte_order: Byte order of the prefix

        Raises:
            LengthOverflow: If the count or byte total is too large for the prefix
        """
        if self.unit is Unit.COUNT:
            self._write_prefix(packer, len(items), byte_order)
            for item in items:
                encode_item(packer, item)
            return

        # Byte unit: encode into scratch space first to measure the block
        scratch = BytePacker()
        for item in items:
            encode_item(scratch, item)
        self._write_prefix(packer, len(scratch), byte_order)
        packer.write_bytes(scratch.to_bytes())

    def decode_items(
        self,
        unpacker: ByteUnpacker,
        decode_item: ItemDecoder,
        byte_order: ByteOrder,
        item_size: int = 1,
    ) -> list[Any]:
        """Read a length prefix and then the elements it describes.

        Args:
            unpacker: Cursor to read from
            decode_item: Callback that decodes one element from a cursor
            byte_order: Byte order of the prefix
            item_size: Minimum encoded size of one element, used to reject
                element counts the remaining input cannot hold

        Raises:
            TruncatedInput: If the prefix or the content is cut short
            InvalidEncoding: If an element runs past the end of a byte-unit block
            TrailingBytes: If an element consumes nothing while block bytes remain
        """
        length = unpacker.read_uint(self.prefix_bits, byte_order)

        if self.unit is Unit.COUNT:
            needed = length * item_size
            if needed > unpacker.bytes_remaining():
                raise TruncatedInput(
                    f"Not enough bytes for {length} elements: need at least {needed}, "
                    f"have {unpacker.bytes_remaining()}"
                )
            return [decode_item(unpacker) for _ in range(length)]

        block = unpacker.take(length)
        items = []
        while block.bytes_remaining():
            before = block.bytes_remaining()
            try:
                items.append(decode_item(block))
            except TruncatedInput as e:
                raise InvalidEncoding(
                    f"Element {len(items)} overruns its {length}-byte block: {e}"
                ) from e
            if block.bytes_remaining() == before:
                raise TrailingBytes(
                    f"{before} bytes left in {length}-byte block cannot be decoded as elements"
                )
        return items


STRATEGIES: dict[LVTag, LengthValue] = {
    LVTag.LV8: LengthValue(8, Unit.COUNT),
    LVTag.LV16: LengthValue(16, Unit.COUNT),
    LVTag.LV32: LengthValue(32, Unit.COUNT),
    LVTag.LV64: LengthValue(64, Unit.COUNT),
    LVTag.LV8B: LengthValue(8, Unit.BYTES),
    LVTag.LV16B: LengthValue(16, Unit.BYTES),
    LVTag.LV32B: LengthValue(32, Unit.BYTES),
    LVTag.LV64B: LengthValue(64, Unit.BYTES),
}


def resolve(tag: LVTag | str) -> LengthValue:
    """Look up the strategy for a tag.

    Args:
        tag: LVTag member or its value, e.g. ``"lv16"``

    Raises:
        SchemaError: If the tag is not one of the eight strategies
    """
    try:
        return STRATEGIES[LVTag(tag)]
    except ValueError:
        raise SchemaError(
            f"Unknown length-value strategy {tag!r}. "
            f"Supported: {', '.join(t.value for t in LVTag)}"
        ) from None
