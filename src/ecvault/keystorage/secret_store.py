"""Alias to key mapping with optional per-entry password encryption."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field

from ..crypto.pbe import pbe_decrypt, pbe_encrypt
from ..crypto.utils import from_base64, to_base64
from ..errors import (
    InvalidCipherBytesError,
    InvalidPasswordError,
    KeyStorageError,
    NoSuchKeyError,
)
from .xml_store import XmlStore, check_text

_LENGTH_PREFIX = struct.Struct("<I")


@dataclass(frozen=True)
class SecretKey:
    """Raw key material tagged with the name of its algorithm.

    Attributes:
        algorithm: Algorithm name, e.g. a curve domain identifier.
        encoded: The key bytes.
    """

    algorithm: str
    encoded: bytes = field(repr=False)


def encode_secret_key(key: SecretKey) -> bytes:
    """Serialize a key as ``uint32_le(len(alg)) || alg || encoded``."""
    algorithm = key.algorithm.encode("utf-8")
    return _LENGTH_PREFIX.pack(len(algorithm)) + algorithm + bytes(key.encoded)


def decode_secret_key(data: bytes) -> SecretKey:
    """Parse bytes written by :func:`encode_secret_key`.

    Raises:
        KeyStorageError: If the data is truncated or the algorithm name is not UTF-8.
    """
    if len(data) < _LENGTH_PREFIX.size:
        raise KeyStorageError("Key entry too short")
    (length,) = _LENGTH_PREFIX.unpack_from(data)
    end = _LENGTH_PREFIX.size + length
    if end > len(data):
        raise KeyStorageError(
            f"Key entry truncated: algorithm needs {length} bytes, {len(data) - 4} available"
        )
    try:
        algorithm = bytes(data[_LENGTH_PREFIX.size : end]).decode("utf-8")
    except UnicodeDecodeError as e:
        raise KeyStorageError("Key entry algorithm is not valid UTF-8") from e
    return SecretKey(algorithm=algorithm, encoded=bytes(data[end:]))


class SecretKeyStore:
    """Named entries held in memory and persisted as a whole.

    Encrypted entries, plain entries and text annotations share one alias
    space; setting an alias replaces whatever was stored under it.

    Example:
        >>> store = SecretKeyStore()
        >>> store.set_entry("private", SecretKey("alg", b"key"), "pw1")
        >>> store.get_entry("private", "pw1").encoded
        b'key'
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def set_entry(self, alias: str, key: SecretKey, password: str) -> None:
        """Encrypt ``key`` under ``password`` and store it as ``alias``."""
        if key is None or password is None:
            raise ValueError("key and password must not be None")
        crypted = pbe_encrypt(encode_secret_key(key), password)
        self._entries[alias] = to_base64(crypted)

    def get_entry(self, alias: str, password: str) -> SecretKey:
        """Decrypt and return the key stored as ``alias``.

        Raises:
            NoSuchKeyError: If there is no entry for ``alias``.
            InvalidPasswordError: If the password is wrong or the entry is corrupt.
        """
        value = self._lookup(alias)
        try:
            plain = pbe_decrypt(from_base64(value), password)
            return decode_secret_key(plain)
        except (InvalidCipherBytesError, KeyStorageError, ValueError) as e:
            raise InvalidPasswordError(f"Cannot decrypt entry '{alias}'") from e

    def set_entry_unencrypted(self, alias: str, key: SecretKey) -> None:
        """Store ``key`` as ``alias`` without encryption (public material only)."""
        if key is None:
            raise ValueError("key must not be None")
        self._entries[alias] = to_base64(encode_secret_key(key))

    def get_entry_unencrypted(self, alias: str) -> SecretKey:
        """Return the plain key stored as ``alias``.

        Raises:
            NoSuchKeyError: If there is no entry for ``alias``.
            KeyStorageError: If the entry cannot be decoded.
        """
        value = self._lookup(alias)
        try:
            return decode_secret_key(from_base64(value))
        except ValueError as e:
            raise KeyStorageError(f"Cannot decode entry '{alias}': {e}") from e

    def add_text_annotation(self, alias: str, text: str) -> None:
        """Store free text as ``alias``.

        Raises:
            ValueError: If ``text`` holds a character XML cannot carry.
        """
        self._entries[alias] = check_text(text)

    def get_text_annotation(self, alias: str) -> str | None:
        return self._entries.get(alias)

    def aliases(self) -> set[str]:
        return set(self._entries)

    def __contains__(self, alias: object) -> bool:
        return alias in self._entries

    def load(self, path: str | os.PathLike[str]) -> SecretKeyStore:
        """Replace all entries with the contents of ``path``.

        Raises:
            KeyStorageError: If the file cannot be read or parsed.
        """
        backing = XmlStore.load(path)
        self._entries = backing.items()
        return self

    def store(self, path: str | os.PathLike[str]) -> None:
        """Write all entries to ``path``.

        Raises:
            KeyStorageError: If the file cannot be written.
        """
        XmlStore(self._entries).persist(path)

    def _lookup(self, alias: str) -> str:
        value = self._entries.get(alias)
        if value is None:
            raise NoSuchKeyError(f"No entry for alias '{alias}'")
        return value
