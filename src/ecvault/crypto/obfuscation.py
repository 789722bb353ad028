"""Reversible byte scrambling.

This is NOT encryption. The 6-byte salt that keys the keystream travels in
the clear in front of the output, so anybody can undo it. It only keeps
casual byte-level inspection from seeing the input. An obfuscated
byte string is 6 bytes longer than its input.
"""

from __future__ import annotations

import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .constants import OBFUSCATION_SALT_SIZE


def _keystream_xor(salt: bytes, data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(salt)
    key = digest.finalize()
    cipher = Cipher(algorithms.ChaCha20(key, b"\x00" * 16), mode=None)
    encryptor = cipher.encryptor()
    return encryptor.update(data) + encryptor.finalize()


def obfuscate(data: bytes) -> bytes:
    """Scramble ``data`` under a fresh random salt.

    Returns:
        The salt followed by the scrambled bytes.
    """
    salt = os.urandom(OBFUSCATION_SALT_SIZE)
    return salt + _keystream_xor(salt, bytes(data))


def deobfuscate(data: bytes) -> bytes:
    """Undo :func:`obfuscate`.

    Raises:
        ValueError: If ``data`` is shorter than the salt.
    """
    if len(data) < OBFUSCATION_SALT_SIZE:
        raise ValueError(
            f"Obfuscated data too short: {len(data)} bytes, expected at least "
            f"{OBFUSCATION_SALT_SIZE}"
        )
    salt = bytes(data[:OBFUSCATION_SALT_SIZE])
    return _keystream_xor(salt, bytes(data[OBFUSCATION_SALT_SIZE:]))
