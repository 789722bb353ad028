"""Error hierarchy for ecvault."""

from __future__ import annotations


class EcVaultError(Exception):
    """Base exception for all ecvault errors."""

    pass


class DomainNotFoundError(EcVaultError):
    """Unknown curve identifier or key size.

    Attributes:
        domain: The identifier or key size that was looked up.
    """

    def __init__(self, domain: str | int) -> None:
        self.domain = domain
        if isinstance(domain, int):
            super().__init__(f"Unsupported key size: {domain}")
        else:
            super().__init__(f"Unknown curve domain: {domain!r}")


class MalformedEnvelopeError(EcVaultError):
    """Ciphertext envelope is structurally invalid."""

    pass


class AuthenticationError(EcVaultError):
    """Authentication of encrypted data failed.

    CRITICAL: The message never reveals which step failed. A tag mismatch,
    a bad shared secret and a padding failure all look the same to callers.
    """

    pass


class InvalidPasswordError(AuthenticationError):
    """A password-protected keystore entry could not be decrypted."""

    pass


class InvalidCipherBytesError(EcVaultError):
    """Password-based decryption failed (wrong password or corrupt bytes)."""

    pass


class NoSuchKeyError(EcVaultError):
    """Alias not present in a keystore."""

    pass


class KeyStorageError(EcVaultError):
    """Keystore I/O failure or malformed persisted document."""

    pass
