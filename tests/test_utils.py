"""Tests for encoding helpers."""

import pytest

from ecvault.crypto.utils import bytes_to_int, from_base64, int_to_bytes, to_base64


class TestBase64:
    """Tests for standard base64 encoding/decoding."""

    def test_to_base64(self) -> None:
        """Test standard base64 encoding."""
        assert to_base64(b"Hello, World!") == "SGVsbG8sIFdvcmxkIQ=="

    def test_from_base64(self) -> None:
        """Test standard base64 decoding."""
        assert from_base64("SGVsbG8sIFdvcmxkIQ==") == b"Hello, World!"

    def test_whitespace_ignored(self) -> None:
        """Test that surrounding and embedded whitespace is ignored."""
        assert from_base64("\n    SGVsbG8s\n  IFdvcmxkIQ==\n") == b"Hello, World!"

    def test_invalid(self) -> None:
        """Test that invalid characters raise ValueError."""
        with pytest.raises(ValueError, match="Invalid base64"):
            from_base64("abc!def")


class TestIntegers:
    """Tests for integer/bytes conversion."""

    def test_fixed_length(self) -> None:
        """Test left padding to the requested length."""
        assert int_to_bytes(1, 4) == b"\x00\x00\x00\x01"
        assert bytes_to_int(b"\x00\x00\x01\x00") == 256
