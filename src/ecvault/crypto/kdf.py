"""Password-based key derivation (PBKDF2-HMAC-SHA256) for ecvault.

All derivations use a fixed, compiled-in salt and append a fixed pepper to
the password. A missing or empty password is replaced by a second fixed
string, so it still derives from non-trivial input. That is a deliberate
weakening: anyone with this source can derive the same bytes, so keys
protected by an absent password are only obscured, not secured.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..constants import (
    DEFAULT_PBKDF_ITERATIONS,
    DETERMINISTIC_RANDOM_ITERATIONS,
    DETERMINISTIC_RANDOM_SIZE,
)
from .constants import PBKDF_EMPTY_PASSWORD, PBKDF_PEPPER, PBKDF_SALT

logger = logging.getLogger("ecvault")


def derive_key_bytes(
    password: str | None,
    length: int,
    iterations: int = DEFAULT_PBKDF_ITERATIONS,
) -> bytes:
    """Derive key bytes from a human password.

    Args:
        password: The password. None or "" falls back to a fixed substitute.
        length: Number of bytes to derive.
        iterations: PBKDF2 iteration count.

    Returns:
        ``length`` derived bytes.

    Raises:
        ValueError: If length or iterations is not positive.
    """
    if length <= 0:
        raise ValueError(f"Invalid key length: {length}")
    if iterations <= 0:
        raise ValueError(f"Invalid iteration count: {iterations}")
    if not password:
        logger.debug("Deriving key bytes without a password")
        password = PBKDF_EMPTY_PASSWORD
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=PBKDF_SALT,
        iterations=iterations,
    )
    return kdf.derive((password + PBKDF_PEPPER).encode("utf-8"))


def derive_password(password: str | None, length: int) -> str:
    """Stretch a human password into a fixed-length password string.

    Each derived byte becomes one character in the range U+0000..U+00FF.

    Args:
        password: The human password (None or "" allowed, see module docs).
        length: Number of characters in the result.

    Returns:
        The derived password.
    """
    return "".join(chr(b) for b in derive_key_bytes(password, length))


class DeterministicRandom:
    """A fixed, seed-driven byte source usable as ``randfunc``.

    The whole output is derived up front from ``seed`` via PBKDF2, so the
    same seed yields the same byte stream in every process. Calls consume
    the stream in order; asking for more than ``size`` bytes in total
    raises ValueError.

    Instances are not thread-safe.
    """

    def __init__(self, seed: str, size: int = DETERMINISTIC_RANDOM_SIZE) -> None:
        if not seed:
            raise ValueError("Seed for deterministic random is empty")
        self._data = derive_key_bytes(seed, size, DETERMINISTIC_RANDOM_ITERATIONS)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def __call__(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f"Invalid byte count: {n}")
        if n > self.remaining:
            raise ValueError("Deterministic random source exhausted")
        chunk = self._data[self._offset : self._offset + n]
        self._offset += n
        return chunk
