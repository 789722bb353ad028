"""File-backed keystores holding one half of an ECC key pair each.

The private keystore carries the password-encrypted private key and the
role "Receiver (Decoder)"; the public keystore carries the plain public key
and the role "Sender (Encoder)". Both may carry a free text comment.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..crypto.keypair import PrivateKey, PublicKey
from ..errors import (
    DomainNotFoundError,
    InvalidPasswordError,
    KeyStorageError,
)
from .secret_store import SecretKey, SecretKeyStore

logger = logging.getLogger("ecvault")

ALIAS_ROLE = "participant role"
ALIAS_COMMENTS = "comments"
ALIAS_PRIVATE = "private"
ALIAS_PUBLIC = "public"

ROLE_RECEIVER = "Receiver (Decoder)"
ROLE_SENDER = "Sender (Encoder)"


class ECCKeyStore:
    """Base class binding a :class:`SecretKeyStore` to a file and a role.

    Subclasses set ``ROLE`` and ``OTHER_ROLE``. Loading a file whose role
    annotation names ``OTHER_ROLE`` raises KeyStorageError.
    """

    ROLE: str = ""
    OTHER_ROLE: str = ""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._store = SecretKeyStore()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def role(self) -> str | None:
        """The role annotation currently held, if any."""
        return self._store.get_text_annotation(ALIAS_ROLE)

    @property
    def comments(self) -> str | None:
        return self._store.get_text_annotation(ALIAS_COMMENTS)

    def load(self) -> None:
        """Replace the in-memory entries with the file contents.

        Raises:
            KeyStorageError: If the file cannot be read, or it belongs to the
                other half of the key pair.
        """
        self._store.load(self._path)
        role = self.role
        if role is not None and role == self.OTHER_ROLE:
            raise KeyStorageError(
                f"{self._path} is a '{role}' keystore, expected '{self.ROLE}'"
            )
        logger.debug("Loaded %s keystore from %s", self.ROLE, self._path)

    def store(self, comments: str | None = None) -> None:
        """Write the keystore with its role and an optional comment.

        Args:
            comments: Free text embedded under "comments"; stripped, and
                written as an empty string when None or blank.

        Raises:
            KeyStorageError: If the file cannot be written.
        """
        self._store.add_text_annotation(ALIAS_ROLE, self.ROLE)
        self._store.add_text_annotation(ALIAS_COMMENTS, (comments or "").strip())
        self._store.store(self._path)
        logger.debug("Stored %s keystore at %s", self.ROLE, self._path)


class PrivateKeyStore(ECCKeyStore):
    """Keystore for the receiver's password-protected private key."""

    ROLE = ROLE_RECEIVER
    OTHER_ROLE = ROLE_SENDER

    def set_private_key(self, key: PrivateKey, password: str) -> None:
        if key is None or password is None:
            raise ValueError("key and password must not be None")
        self._store.set_entry(ALIAS_PRIVATE, SecretKey(key.algorithm, key.encoded), password)

    def get_private_key(self, password: str) -> PrivateKey:
        """Decrypt the private key.

        Raises:
            NoSuchKeyError: If the keystore holds no private key.
            InvalidPasswordError: If the password is wrong.
        """
        entry = self._store.get_entry(ALIAS_PRIVATE, password)
        try:
            return PrivateKey.from_encoded(entry.encoded, entry.algorithm)
        except (DomainNotFoundError, ValueError) as e:
            raise InvalidPasswordError("Cannot decrypt private key") from e


class PublicKeyStore(ECCKeyStore):
    """Keystore for the receiver's public key, stored unencrypted."""

    ROLE = ROLE_SENDER
    OTHER_ROLE = ROLE_RECEIVER

    def set_public_key(self, key: PublicKey) -> None:
        if key is None:
            raise ValueError("key must not be None")
        self._store.set_entry_unencrypted(ALIAS_PUBLIC, SecretKey(key.algorithm, key.encoded))

    def get_public_key(self) -> PublicKey:
        """Return the public key.

        Raises:
            NoSuchKeyError: If the keystore holds no public key.
            KeyStorageError: If the stored key is not a valid point.
        """
        entry = self._store.get_entry_unencrypted(ALIAS_PUBLIC)
        try:
            return PublicKey.from_encoded(entry.encoded, entry.algorithm)
        except (DomainNotFoundError, ValueError) as e:
            raise KeyStorageError(f"Invalid public key in {self._path}: {e}") from e
