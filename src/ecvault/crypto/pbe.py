"""Password-based encryption along the lines of PKCS#12 v1.0, Appendix B.

Key and IV are derived from the password with the PKCS#12 derivation
function over SHA-256 and the data is encrypted with AES-256-CBC and PKCS7
padding. The salt is 12 random bytes followed by 52 fixed bytes; the random
part is prepended, unencrypted, to the ciphertext.

The encrypted payload is an 8-byte truncated SHA-256 of the data followed by
the data itself. Decryption checks it, so a wrong password that happens to
produce valid padding is still rejected.
"""

from __future__ import annotations

import hmac
import os

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import InvalidCipherBytesError
from .constants import (
    AES_BLOCK_SIZE,
    AES_KEY_SIZE,
    PBE_CHECK_SIZE,
    PBE_FIXED_SALT,
    PBE_ITERATIONS,
    PBE_SALT_PREFIX_SIZE,
)

# PKCS#12 diversifier IDs
_KEY_MATERIAL = 1
_IV_MATERIAL = 2

# SHA-256 block size (v) in bytes
_HASH_BLOCK_SIZE = 64


def password_to_bytes(password: str) -> bytes:
    """Encode a password as a PKCS#12 BMPString with a two-byte terminator.

    An empty password encodes to no bytes at all.
    """
    if not password:
        return b""
    return password.encode("utf-16-be") + b"\x00\x00"


def _fill(data: bytes, block_size: int) -> bytes:
    """Repeat ``data`` up to the next multiple of ``block_size``."""
    if not data:
        return b""
    length = block_size * ((len(data) + block_size - 1) // block_size)
    return (data * (length // len(data) + 1))[:length]


def pkcs12_derive(
    password: bytes,
    salt: bytes,
    iterations: int,
    diversifier: int,
    length: int,
) -> bytes:
    """PKCS#12 v1.0 Appendix B key derivation with SHA-256.

    Args:
        password: Encoded password (see :func:`password_to_bytes`).
        salt: The salt.
        iterations: Iteration count.
        diversifier: 1 for key material, 2 for IV material, 3 for MAC keys.
        length: Number of bytes to produce.

    Returns:
        ``length`` derived bytes.
    """
    v = _HASH_BLOCK_SIZE
    d = bytes([diversifier]) * v
    i = bytearray(_fill(salt, v) + _fill(password, v))
    out = b""
    while len(out) < length:
        digest = hashes.Hash(hashes.SHA256())
        digest.update(d + bytes(i))
        a = digest.finalize()
        for _ in range(1, iterations):
            digest = hashes.Hash(hashes.SHA256())
            digest.update(a)
            a = digest.finalize()
        out += a
        if len(out) >= length:
            break
        b = int.from_bytes(_fill(a, v), "big")
        for j in range(0, len(i), v):
            block = (int.from_bytes(i[j : j + v], "big") + b + 1) % (1 << (8 * v))
            i[j : j + v] = block.to_bytes(v, "big")
    return out[:length]


def _check_value(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()[:PBE_CHECK_SIZE]


def _process(for_encryption: bool, data: bytes, password: str, salt: bytes) -> bytes:
    pwd = password_to_bytes(password)
    key = pkcs12_derive(pwd, salt, PBE_ITERATIONS, _KEY_MATERIAL, AES_KEY_SIZE)
    iv = pkcs12_derive(pwd, salt, PBE_ITERATIONS, _IV_MATERIAL, AES_BLOCK_SIZE)
    cipher = Cipher(algorithms.AES(key), modes.CBC(iv))
    if for_encryption:
        padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
        padded = padder.update(data) + padder.finalize()
        encryptor = cipher.encryptor()
        return encryptor.update(padded) + encryptor.finalize()
    decryptor = cipher.decryptor()
    padded = decryptor.update(data) + decryptor.finalize()
    unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def pbe_encrypt(data: bytes, password: str) -> bytes:
    """Encrypt bytes under a password.

    Args:
        data: The bytes to encrypt (may be empty).
        password: The password.

    Returns:
        12-byte random salt prefix followed by the ciphertext.

    Raises:
        InvalidCipherBytesError: If encryption fails.
    """
    salt_prefix = os.urandom(PBE_SALT_PREFIX_SIZE)
    try:
        payload = _check_value(bytes(data)) + bytes(data)
        ciphertext = _process(True, payload, password, salt_prefix + PBE_FIXED_SALT)
    except Exception as e:
        raise InvalidCipherBytesError(f"Password-based encryption failed: {e}") from e
    return salt_prefix + ciphertext


def pbe_decrypt(data: bytes, password: str) -> bytes:
    """Decrypt bytes produced by :func:`pbe_encrypt`.

    A wrong password shows up as a padding error or a check value mismatch
    and is reported exactly like corrupt input.

    Raises:
        InvalidCipherBytesError: If the input is too short or decryption fails.
    """
    if data is None or len(data) < PBE_SALT_PREFIX_SIZE + AES_BLOCK_SIZE:
        raise InvalidCipherBytesError("Cipher bytes are missing or too short")
    salt_prefix = bytes(data[:PBE_SALT_PREFIX_SIZE])
    ciphertext = bytes(data[PBE_SALT_PREFIX_SIZE:])
    try:
        payload = _process(False, ciphertext, password, salt_prefix + PBE_FIXED_SALT)
    except Exception as e:
        raise InvalidCipherBytesError("Password-based decryption failed") from e
    check, plain = payload[:PBE_CHECK_SIZE], payload[PBE_CHECK_SIZE:]
    if len(check) < PBE_CHECK_SIZE or not hmac.compare_digest(check, _check_value(plain)):
        raise InvalidCipherBytesError("Password-based decryption failed")
    return plain
