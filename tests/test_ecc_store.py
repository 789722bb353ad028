"""Tests for the ECC private and public keystores."""

from __future__ import annotations

import pytest

from ecvault.crypto.engine import create_key_pair
from ecvault.errors import InvalidPasswordError, KeyStorageError, NoSuchKeyError
from ecvault.keystorage.ecc_store import (
    ALIAS_COMMENTS,
    ALIAS_ROLE,
    ROLE_RECEIVER,
    ROLE_SENDER,
    PrivateKeyStore,
    PublicKeyStore,
)
from ecvault.keystorage.xml_store import XmlStore


@pytest.fixture(scope="module")
def keypair():
    """A 256-bit key pair shared by the tests in this module."""
    return create_key_pair(256)


class TestPrivateKeyStore:
    """Tests for PrivateKeyStore."""

    def test_round_trip(self, tmp_path, keypair) -> None:
        """Test that the private key survives a disk round trip."""
        path = tmp_path / "decoder.xml"
        store = PrivateKeyStore(path)
        store.set_private_key(keypair.private_key, "pw1")
        store.store()

        loaded = PrivateKeyStore(path)
        loaded.load()
        assert loaded.get_private_key("pw1") == keypair.private_key
        assert loaded.get_private_key("pw1").encoded == keypair.private_key.encoded

    def test_role_and_comments_written(self, tmp_path, keypair) -> None:
        """Test the annotations written next to the key."""
        path = tmp_path / "decoder.xml"
        store = PrivateKeyStore(path)
        store.set_private_key(keypair.private_key, "pw1")
        store.store("  for the billing service  ")

        raw = XmlStore.load(path)
        assert raw.get(ALIAS_ROLE) == ROLE_RECEIVER
        assert raw.get(ALIAS_COMMENTS) == "for the billing service"
        assert raw.names() == {"private", ALIAS_ROLE, ALIAS_COMMENTS}

        loaded = PrivateKeyStore(path)
        loaded.load()
        assert loaded.role == ROLE_RECEIVER
        assert loaded.comments == "for the billing service"

    def test_blank_comments(self, tmp_path, keypair) -> None:
        """Test that missing comments are stored as an empty string."""
        path = tmp_path / "decoder.xml"
        store = PrivateKeyStore(path)
        store.set_private_key(keypair.private_key, "pw1")
        store.store("   ")
        assert XmlStore.load(path).get(ALIAS_COMMENTS) == ""

    def test_wrong_password(self, tmp_path, keypair) -> None:
        """Test that a wrong password raises InvalidPasswordError."""
        path = tmp_path / "decoder.xml"
        store = PrivateKeyStore(path)
        store.set_private_key(keypair.private_key, "pw1")
        store.store()

        loaded = PrivateKeyStore(path)
        loaded.load()
        with pytest.raises(InvalidPasswordError):
            loaded.get_private_key("wrong")

    def test_missing_key(self, tmp_path) -> None:
        """Test that a store without a private key raises NoSuchKeyError."""
        path = tmp_path / "decoder.xml"
        PrivateKeyStore(path).store()

        loaded = PrivateKeyStore(path)
        loaded.load()
        with pytest.raises(NoSuchKeyError):
            loaded.get_private_key("pw1")

    def test_refuses_public_keystore(self, tmp_path, keypair) -> None:
        """Test that an encoder keystore cannot be loaded as a decoder keystore."""
        path = tmp_path / "encoder.xml"
        public = PublicKeyStore(path)
        public.set_public_key(keypair.public_key)
        public.store()

        with pytest.raises(KeyStorageError, match="Sender"):
            PrivateKeyStore(path).load()

    def test_none_rejected(self, tmp_path, keypair) -> None:
        """Test that None key or password is rejected."""
        store = PrivateKeyStore(tmp_path / "decoder.xml")
        with pytest.raises(ValueError):
            store.set_private_key(keypair.private_key, None)  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            store.set_private_key(None, "pw1")  # type: ignore[arg-type]


class TestPublicKeyStore:
    """Tests for PublicKeyStore."""

    def test_round_trip(self, tmp_path, keypair) -> None:
        """Test that the public key survives a disk round trip."""
        path = tmp_path / "encoder.xml"
        store = PublicKeyStore(path)
        store.set_public_key(keypair.public_key)
        store.store("comment")

        loaded = PublicKeyStore(path)
        loaded.load()
        assert loaded.get_public_key() == keypair.public_key
        assert loaded.role == ROLE_SENDER

    def test_refuses_private_keystore(self, tmp_path, keypair) -> None:
        """Test that a decoder keystore cannot be loaded as an encoder keystore."""
        path = tmp_path / "decoder.xml"
        private = PrivateKeyStore(path)
        private.set_private_key(keypair.private_key, "pw1")
        private.store()

        with pytest.raises(KeyStorageError, match="Receiver"):
            PublicKeyStore(path).load()

    def test_accepts_file_without_role(self, tmp_path, keypair) -> None:
        """Test that a file lacking a role annotation still loads."""
        path = tmp_path / "encoder.xml"
        store = PublicKeyStore(path)
        store.set_public_key(keypair.public_key)
        store.store()

        raw = XmlStore.load(path)
        XmlStore({"public": raw.get("public") or ""}).persist(path)

        loaded = PublicKeyStore(path)
        loaded.load()
        assert loaded.role is None
        assert loaded.get_public_key() == keypair.public_key

    def test_corrupt_public_key(self, tmp_path) -> None:
        """Test that a stored value that is not a point raises KeyStorageError."""
        path = tmp_path / "encoder.xml"
        # algorithm "x" with a two-byte body
        XmlStore({"public": "AQAAAHgAAQ=="}).persist(path)

        loaded = PublicKeyStore(path)
        loaded.load()
        with pytest.raises(KeyStorageError, match="Invalid public key"):
            loaded.get_public_key()

    def test_missing_key(self, tmp_path) -> None:
        """Test that a store without a public key raises NoSuchKeyError."""
        path = tmp_path / "encoder.xml"
        PublicKeyStore(path).store()

        loaded = PublicKeyStore(path)
        loaded.load()
        with pytest.raises(NoSuchKeyError):
            loaded.get_public_key()

    def test_missing_file(self, tmp_path) -> None:
        """Test that loading a missing file raises KeyStorageError."""
        with pytest.raises(KeyStorageError):
            PublicKeyStore(tmp_path / "missing.xml").load()
