"""Encoding helpers for ecvault."""

import base64
import binascii


def to_base64(data: bytes) -> str:
    """Encode bytes to standard base64.

    Args:
        data: The bytes to encode.

    Returns:
        Standard base64 string with padding.
    """
    return base64.b64encode(data).decode("ascii")


def from_base64(s: str) -> bytes:
    """Decode a standard base64 string to bytes.

    Surrounding whitespace (e.g. from an indented XML document) is ignored.

    Args:
        s: The base64 string to decode.

    Returns:
        The decoded bytes.

    Raises:
        ValueError: If the string is not valid base64.
    """
    try:
        return base64.b64decode("".join(s.split()), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 data: {e}") from e


def int_to_bytes(value: int, length: int) -> bytes:
    """Encode a non-negative integer as fixed-length big-endian bytes."""
    return value.to_bytes(length, "big")


def bytes_to_int(data: bytes) -> int:
    """Decode big-endian bytes to a non-negative integer."""
    return int.from_bytes(data, "big")
