"""Tests for the XML name/value store and the secret key store."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from ecvault.crypto.utils import from_base64
from ecvault.errors import (
    AuthenticationError,
    InvalidPasswordError,
    KeyStorageError,
    NoSuchKeyError,
)
from ecvault.keystorage.secret_store import (
    SecretKey,
    SecretKeyStore,
    decode_secret_key,
    encode_secret_key,
)
from ecvault.keystorage.xml_store import XmlStore


class TestXmlStore:
    """Tests for XmlStore."""

    def test_put_get(self) -> None:
        """Test put returns the previous value."""
        store = XmlStore()
        assert store.put("a", "1") is None
        assert store.put("a", "2") == "1"
        assert store.get("a") == "2"
        assert store.get("missing") is None
        assert store.names() == {"a"}

    def test_none_rejected(self) -> None:
        """Test that None names and values are rejected."""
        store = XmlStore()
        with pytest.raises(ValueError):
            store.put(None, "x")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            store.put("x", None)  # type: ignore[arg-type]

    def test_persist_and_load(self, tmp_path) -> None:
        """Test that a persisted store loads back identically."""
        path = tmp_path / "store.xml"
        store = XmlStore({"public": "AAEC", "comments": "", "participant role": "Sender (Encoder)"})
        store.persist(path)

        loaded = XmlStore.load(path)
        assert loaded.items() == store.items()

    def test_document_layout(self, tmp_path) -> None:
        """Test the values/pair/name/value element layout."""
        path = tmp_path / "store.xml"
        XmlStore({"k": "v"}).persist(path)

        root = ET.parse(path).getroot()
        assert root.tag == "values"
        pairs = root.findall("pair")
        assert len(pairs) == 1
        assert pairs[0].findtext("name") == "k"
        assert pairs[0].findtext("value") == "v"
        assert path.read_bytes().startswith(b"<?xml")

    def test_persist_replaces_and_leaves_no_temp_files(self, tmp_path) -> None:
        """Test that persisting over a file replaces it cleanly."""
        path = tmp_path / "store.xml"
        XmlStore({"a": "1"}).persist(path)
        XmlStore({"b": "2"}).persist(path)

        assert XmlStore.load(path).items() == {"b": "2"}
        assert [p.name for p in tmp_path.iterdir()] == ["store.xml"]

    def test_special_characters(self, tmp_path) -> None:
        """Test that markup characters survive a round trip."""
        path = tmp_path / "store.xml"
        XmlStore({"comments": "a < b & c > \"d\""}).persist(path)
        assert XmlStore.load(path).get("comments") == "a < b & c > \"d\""

    def test_control_characters_rejected(self) -> None:
        """Test that characters XML 1.0 cannot carry are refused on put."""
        store = XmlStore()
        for text in ("line\x07bell", "\x00", "esc\x1b", "\ufffe"):
            with pytest.raises(ValueError, match="cannot be stored in XML"):
                store.put("comments", text)
            with pytest.raises(ValueError, match="cannot be stored in XML"):
                store.put(text, "value")
        assert len(store) == 0

    def test_allowed_whitespace_and_astral_characters(self, tmp_path) -> None:
        """Test that tabs, newlines and characters outside the BMP round trip."""
        path = tmp_path / "store.xml"
        XmlStore({"comments": "tab\there\nnext \U0001f511"}).persist(path)
        assert XmlStore.load(path).get("comments") == "tab\there\nnext \U0001f511"

    def test_carriage_returns_normalized(self, tmp_path) -> None:
        """Test that CRLF and lone CR are stored as LF, in memory and on disk."""
        path = tmp_path / "store.xml"
        store = XmlStore({"comments": "a\r\nb\rc"})
        assert store.get("comments") == "a\nb\nc"
        store.persist(path)
        assert XmlStore.load(path).get("comments") == "a\nb\nc"

    def test_load_missing_file(self, tmp_path) -> None:
        """Test that a missing file raises KeyStorageError."""
        with pytest.raises(KeyStorageError, match="Failed to read"):
            XmlStore.load(tmp_path / "nope.xml")

    def test_load_malformed(self, tmp_path) -> None:
        """Test that broken XML raises KeyStorageError."""
        path = tmp_path / "bad.xml"
        path.write_text("<values><pair>", encoding="utf-8")
        with pytest.raises(KeyStorageError):
            XmlStore.load(path)

    def test_load_wrong_root(self, tmp_path) -> None:
        """Test that a document with another root element is rejected."""
        path = tmp_path / "other.xml"
        path.write_text("<keys/>", encoding="utf-8")
        with pytest.raises(KeyStorageError, match="root element"):
            XmlStore.load(path)

    def test_load_incomplete_pair(self, tmp_path) -> None:
        """Test that a pair without a value is rejected."""
        path = tmp_path / "incomplete.xml"
        path.write_text("<values><pair><name>a</name></pair></values>", encoding="utf-8")
        with pytest.raises(KeyStorageError, match="Incomplete"):
            XmlStore.load(path)

    def test_persist_to_missing_directory(self, tmp_path) -> None:
        """Test that an unwritable target raises KeyStorageError."""
        with pytest.raises(KeyStorageError, match="Failed to write"):
            XmlStore({"a": "1"}).persist(tmp_path / "missing" / "store.xml")


class TestSecretKeyEncoding:
    """Tests for the secret key byte layout."""

    def test_layout(self) -> None:
        """Test little-endian length prefix, algorithm and key bytes."""
        encoded = encode_secret_key(SecretKey("alg", b"\x01\x02"))
        assert encoded == b"\x03\x00\x00\x00alg\x01\x02"

    def test_round_trip(self) -> None:
        """Test that decoding inverts encoding, including non-ASCII names."""
        key = SecretKey("curve é", b"\x00" * 40)
        assert decode_secret_key(encode_secret_key(key)) == key

    def test_empty_key_bytes(self) -> None:
        """Test that an empty key body is allowed."""
        assert decode_secret_key(b"\x01\x00\x00\x00a") == SecretKey("a", b"")

    def test_truncated(self) -> None:
        """Test that truncated input raises KeyStorageError."""
        with pytest.raises(KeyStorageError, match="too short"):
            decode_secret_key(b"\x01\x00")
        with pytest.raises(KeyStorageError, match="truncated"):
            decode_secret_key(b"\x10\x00\x00\x00abc")

    def test_invalid_utf8(self) -> None:
        """Test that a non-UTF-8 algorithm name raises KeyStorageError."""
        with pytest.raises(KeyStorageError, match="UTF-8"):
            decode_secret_key(b"\x01\x00\x00\x00\xff")


class TestSecretKeyStore:
    """Tests for SecretKeyStore."""

    def test_encrypted_entry(self) -> None:
        """Test set_entry / get_entry with the right password."""
        store = SecretKeyStore()
        key = SecretKey("alg", b"private bytes")
        store.set_entry("private", key, "pw1")
        assert store.get_entry("private", "pw1") == key

    def test_wrong_password(self) -> None:
        """Test that a wrong password raises InvalidPasswordError."""
        store = SecretKeyStore()
        store.set_entry("private", SecretKey("alg", b"private bytes"), "pw1")
        with pytest.raises(InvalidPasswordError) as exc_info:
            store.get_entry("private", "pw2")
        assert isinstance(exc_info.value, AuthenticationError)

    def test_missing_alias(self) -> None:
        """Test that a missing alias raises NoSuchKeyError."""
        store = SecretKeyStore()
        with pytest.raises(NoSuchKeyError, match="nothing"):
            store.get_entry("nothing", "pw1")
        with pytest.raises(NoSuchKeyError):
            store.get_entry_unencrypted("nothing")

    def test_unencrypted_entry(self) -> None:
        """Test set_entry_unencrypted / get_entry_unencrypted."""
        store = SecretKeyStore()
        key = SecretKey("alg", b"public bytes")
        store.set_entry_unencrypted("public", key)
        assert store.get_entry_unencrypted("public") == key

    def test_annotations_share_alias_space(self) -> None:
        """Test that an annotation replaces a key stored under the same alias."""
        store = SecretKeyStore()
        store.set_entry_unencrypted("x", SecretKey("alg", b"k"))
        store.add_text_annotation("x", "just text!")
        assert store.get_text_annotation("x") == "just text!"
        assert store.aliases() == {"x"}
        assert "x" in store
        with pytest.raises(KeyStorageError):
            store.get_entry_unencrypted("x")

    def test_annotation_is_not_a_key(self) -> None:
        """Test that reading an annotation as an encrypted key fails."""
        store = SecretKeyStore()
        store.add_text_annotation("comments", "")
        with pytest.raises(InvalidPasswordError):
            store.get_entry("comments", "pw1")

    def test_annotation_control_characters_rejected(self) -> None:
        """Test that an annotation XML cannot carry is refused before it is stored."""
        store = SecretKeyStore()
        with pytest.raises(ValueError):
            store.add_text_annotation("comments", "line\x07bell")
        assert "comments" not in store

    def test_store_and_load(self, tmp_path) -> None:
        """Test that all entries survive a disk round trip."""
        path = tmp_path / "keys.xml"
        store = SecretKeyStore()
        store.set_entry("private", SecretKey("alg", b"secret"), "pw1")
        store.set_entry_unencrypted("public", SecretKey("alg", b"public"))
        store.add_text_annotation("comments", "hello")
        store.store(path)

        loaded = SecretKeyStore().load(path)
        assert loaded.aliases() == {"private", "public", "comments"}
        assert loaded.get_entry("private", "pw1") == SecretKey("alg", b"secret")
        assert loaded.get_entry_unencrypted("public") == SecretKey("alg", b"public")
        assert loaded.get_text_annotation("comments") == "hello"

    def test_load_replaces_everything(self, tmp_path) -> None:
        """Test that load discards entries not present in the file."""
        path = tmp_path / "keys.xml"
        first = SecretKeyStore()
        first.add_text_annotation("a", "1")
        first.store(path)

        second = SecretKeyStore()
        second.add_text_annotation("b", "2")
        second.load(path)
        assert second.aliases() == {"a"}

    def test_encrypted_entry_hides_key(self, tmp_path) -> None:
        """Test that the stored value does not contain the key in the clear."""
        path = tmp_path / "keys.xml"
        store = SecretKeyStore()
        secret = b"very secret key material"
        store.set_entry("private", SecretKey("alg", secret), "pw1")
        store.store(path)

        value = XmlStore.load(path).get("private")
        assert value is not None
        assert secret not in from_base64(value)
        assert secret not in path.read_bytes()
