"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from ipfcodec import U8, U16, U32, LengthPrefixed, Record


class Version(Record):
    """9P-style version message with a 16-bit length-prefixed string."""

    size: U32
    typ: U8
    tag: U16
    msize: U32
    version: str = LengthPrefixed("lv16")


@pytest.fixture
def version_message() -> Version:
    """Sample version message."""
    return Version(size=47, typ=9, tag=15, msize=99, version="muffin")


@pytest.fixture
def version_bytes_le() -> bytes:
    """Little-endian encoding of version_message."""
    return bytes(
        [47, 0, 0, 0, 9, 15, 0, 99, 0, 0, 0, 6, 0] + list(b"muffin")
    )


@pytest.fixture
def dirent_bytes_le() -> bytes:
    """Little-endian encoding of two directory entries, without a prefix.

    The entries are (37, 2, "blueberry") and (73, 9, "muffin").
    """
    return bytes(
        [37, 0, 0, 0, 0, 0, 0, 0, 2, 9, 0]
        + list(b"blueberry")
        + [73, 0, 0, 0, 0, 0, 0, 0, 9, 6, 0]
        + list(b"muffin")
    )
