"""Exception hierarchy for ipfcodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from IpfError for easy catching of any ipfcodec-specific error.
"""

from __future__ import annotations


class IpfError(Exception):
    """Base exception for all ipfcodec errors."""

    pass


class SchemaError(IpfError):
    """Raised when a record schema is invalid.

    Examples:
        - Unsupported integer width (not 8/16/32/64)
        - Unknown length-value strategy tag
        - Variable-length field without a length-value strategy
        - Optional or Union field types
    """

    pass


class EncodeError(IpfError):
    """Raised when encoding a record fails.

    Examples:
        - Value out of range for its integer width
        - Field type mismatch
        - Missing field on the value being encoded
        - Record exceeds ipf_max_bytes
    """

    pass


class LengthOverflow(EncodeError):
    """Raised when content is too long for its length prefix.

    An 8-bit prefix holds at most 255; the prefix is never widened or the
    content truncated to make it fit.
    """

    pass


class DecodeError(IpfError):
    """Raised when decoding binary data fails."""

    pass


class TruncatedInput(DecodeError):
    """Raised when fewer bytes remain than a read or a length prefix requires.

    Also raised when the input ends before a NUL-terminated string's terminator.
    """

    pass


class TrailingBytes(DecodeError):
    """Raised when a value, or a byte-unit block, leaves bytes unconsumed."""

    pass


class InvalidEncoding(DecodeError):
    """Raised when the data is structurally invalid.

    Examples:
        - Invalid UTF-8 in a string field
        - Boolean byte other than 0 or 1
        - Sequence element overrunning its byte-unit block
    """

    pass
