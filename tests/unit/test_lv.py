"""Unit tests for length-value strategies."""

from __future__ import annotations

from typing import Any

import pytest

from ipfcodec import (
    ByteOrder,
    InvalidEncoding,
    LengthOverflow,
    LVTag,
    SchemaError,
    TrailingBytes,
    TruncatedInput,
    Unit,
)
from ipfcodec.codec.bytepack import BytePacker, ByteUnpacker
from ipfcodec.codec.lv import STRATEGIES, resolve

LE = ByteOrder.LITTLE
BE = ByteOrder.BIG


def write_u16(packer: BytePacker, item: Any) -> None:
    packer.write_uint(item, 16, LE)


def read_u16(unpacker: ByteUnpacker) -> Any:
    return unpacker.read_uint(16, LE)


def read_nothing(unpacker: ByteUnpacker) -> Any:
    return None


class TestResolve:
    """Test strategy lookup."""

    def test_eight_strategies(self) -> None:
        """Test every prefix width and unit is offered."""
        pairs = {(s.prefix_bits, s.unit) for s in STRATEGIES.values()}

        assert len(STRATEGIES) == 8
        assert pairs == {(bits, unit) for bits in (8, 16, 32, 64) for unit in Unit}

    def test_resolve_by_name(self) -> None:
        """Test tags resolve from their string value."""
        assert resolve("lv16") is STRATEGIES[LVTag.LV16]
        assert resolve(LVTag.LV32B).unit is Unit.BYTES
        assert resolve("lv64").prefix_bits == 64

    def test_unknown_tag(self) -> None:
        """Test unknown tags are a schema error."""
        with pytest.raises(SchemaError, match="Unknown length-value strategy"):
            resolve("lv12")

    def test_max_length(self) -> None:
        """Test the representable range of each prefix."""
        assert resolve("lv8").max_length == 255
        assert resolve("lv16b").max_length == 65535
        assert resolve("lv64").max_length == 2**64 - 1


class TestPayload:
    """Test string/bytes payload framing."""

    @pytest.mark.parametrize(
        "tag,prefix",
        [
            ("lv8", b"\x06"),
            ("lv16", b"\x06\x00"),
            ("lv32", b"\x06\x00\x00\x00"),
            ("lv64", b"\x06\x00\x00\x00\x00\x00\x00\x00"),
            ("lv8b", b"\x06"),
            ("lv16b", b"\x06\x00"),
        ],
    )
    def test_encode_payload(self, tag: str, prefix: bytes) -> None:
        """Test the prefix is the payload byte count at the strategy width."""
        packer = BytePacker()
        resolve(tag).encode_payload(packer, b"muffin", LE)

        assert packer.to_bytes() == prefix + b"muffin"

    def test_encode_payload_big_endian(self) -> None:
        """Test the prefix follows the byte order."""
        packer = BytePacker()
        resolve("lv32").encode_payload(packer, b"ab", BE)

        assert packer.to_bytes() == b"\x00\x00\x00\x02ab"

    def test_decode_payload(self) -> None:
        """Test reading the prefix then the payload."""
        unpacker = ByteUnpacker(b"\x06\x00muffin\xff")

        assert resolve("lv16").decode_payload(unpacker, LE) == b"muffin"
        assert unpacker.bytes_remaining() == 1

    def test_empty_payload(self) -> None:
        """Test a zero prefix is an empty payload."""
        packer = BytePacker()
        resolve("lv8").encode_payload(packer, b"", LE)

        assert packer.to_bytes() == b"\x00"
        assert resolve("lv8").decode_payload(ByteUnpacker(b"\x00"), LE) == b""

    def test_payload_overflow(self) -> None:
        """Test a payload longer than the prefix can express."""
        with pytest.raises(LengthOverflow, match="exceeds 8-bit prefix"):
            resolve("lv8").encode_payload(BytePacker(), b"x" * 256, LE)

        packer = BytePacker()
        resolve("lv8").encode_payload(packer, b"x" * 255, LE)
        assert len(packer) == 256

    def test_payload_prefix_past_end(self) -> None:
        """Test a prefix claiming more bytes than remain."""
        with pytest.raises(TruncatedInput):
            resolve("lv16").decode_payload(ByteUnpacker(b"\x07\x00muffin"), LE)

    def test_payload_missing_prefix(self) -> None:
        """Test input too short for the prefix itself."""
        with pytest.raises(TruncatedInput):
            resolve("lv32").decode_payload(ByteUnpacker(b"\x00\x00"), LE)


class TestCountUnit:
    """Test element-count sequences."""

    def test_encode_items(self) -> None:
        """Test the prefix is the element count followed by each element."""
        packer = BytePacker()
        resolve("lv8").encode_items(packer, [1, 2, 3], write_u16, LE)

        assert packer.to_bytes() == b"\x03\x01\x00\x02\x00\x03\x00"

    def test_decode_items(self) -> None:
        """Test exactly prefix elements are decoded."""
        unpacker = ByteUnpacker(b"\x02\x00\x01\x00\x02\x00\x03\x00")

        assert resolve("lv16").decode_items(unpacker, read_u16, LE) == [1, 2]
        assert unpacker.bytes_remaining() == 2

    def test_count_overflow(self) -> None:
        """Test more elements than the prefix can count."""
        with pytest.raises(LengthOverflow):
            resolve("lv8").encode_items(BytePacker(), list(range(256)), write_u16, LE)

    def test_count_past_end(self) -> None:
        """Test a count larger than the available elements."""
        with pytest.raises(TruncatedInput):
            resolve("lv8").decode_items(ByteUnpacker(b"\x03\x01\x00\x02\x00"), read_u16, LE)

    def test_count_checked_against_input(self) -> None:
        """Test a count the remaining bytes cannot hold is rejected up front."""
        calls = []

        def read_counted(unpacker: ByteUnpacker) -> Any:
            calls.append(1)
            return read_u16(unpacker)

        unpacker = ByteUnpacker(b"\xff\xff\xff\xff\x01\x00\x02\x00")

        with pytest.raises(TruncatedInput, match="need at least 8589934590"):
            resolve("lv32").decode_items(unpacker, read_counted, LE, item_size=2)
        assert calls == []

    def test_item_size_exact_fit(self) -> None:
        """Test a count that exactly fills the input."""
        unpacker = ByteUnpacker(b"\x02\x01\x00\x02\x00")

        assert resolve("lv8").decode_items(unpacker, read_u16, LE, item_size=2) == [1, 2]

    def test_empty(self) -> None:
        """Test a zero count."""
        packer = BytePacker()
        resolve("lv32").encode_items(packer, [], write_u16, LE)

        assert packer.to_bytes() == b"\x00\x00\x00\x00"
        assert resolve("lv32").decode_items(ByteUnpacker(packer.to_bytes()), read_u16, LE) == []


class TestByteUnit:
    """Test byte-count sequences."""

    def test_encode_items(self) -> None:
        """Test the prefix is the total encoded byte length."""
        packer = BytePacker()
        resolve("lv8b").encode_items(packer, [1, 2, 3], write_u16, LE)

        assert packer.to_bytes() == b"\x06\x01\x00\x02\x00\x03\x00"

    def test_decode_items(self) -> None:
        """Test decoding consumes exactly the prefix bytes."""
        unpacker = ByteUnpacker(b"\x04\x00\x01\x00\x02\x00\x03\x00")

        assert resolve("lv16b").decode_items(unpacker, read_u16, LE) == [1, 2]
        assert unpacker.bytes_remaining() == 2

    def test_byte_overflow(self) -> None:
        """Test the byte total, not the count, is checked against the prefix."""
        # 128 elements fit an 8-bit count but their 256 bytes do not
        items = list(range(128))
        resolve("lv8").encode_items(BytePacker(), items, write_u16, LE)

        with pytest.raises(LengthOverflow, match="Length 256"):
            resolve("lv8b").encode_items(BytePacker(), items, write_u16, LE)

    def test_block_past_end(self) -> None:
        """Test a block longer than the remaining input."""
        with pytest.raises(TruncatedInput):
            resolve("lv8b").decode_items(ByteUnpacker(b"\x05\x01\x00\x02\x00"), read_u16, LE)

    def test_element_overruns_block(self) -> None:
        """Test an element that does not fit in what is left of the block."""
        unpacker = ByteUnpacker(b"\x03\x01\x00\x02\x00")

        with pytest.raises(InvalidEncoding, match="overruns"):
            resolve("lv8b").decode_items(unpacker, read_u16, LE)

    def test_element_consumes_nothing(self) -> None:
        """Test leftover block bytes that no element consumes."""
        with pytest.raises(TrailingBytes):
            resolve("lv8b").decode_items(ByteUnpacker(b"\x01\x00"), read_nothing, LE)

    def test_empty(self) -> None:
        """Test a zero-byte block."""
        unpacker = ByteUnpacker(b"\x00\x00\x00\x00\x00\x00\x00\x00")

        assert resolve("lv64b").decode_items(unpacker, read_u16, LE) == []
        assert unpacker.bytes_remaining() == 0
