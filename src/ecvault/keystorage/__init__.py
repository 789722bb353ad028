"""Keystore persistence for ecvault."""

from .ecc_store import ECCKeyStore, PrivateKeyStore, PublicKeyStore
from .generator import generate_keystores, load_private_key, load_public_key
from .secret_store import SecretKey, SecretKeyStore, decode_secret_key, encode_secret_key
from .xml_store import XmlStore

__all__ = [
    "ECCKeyStore",
    "PrivateKeyStore",
    "PublicKeyStore",
    "SecretKey",
    "SecretKeyStore",
    "XmlStore",
    "decode_secret_key",
    "encode_secret_key",
    "generate_keystores",
    "load_private_key",
    "load_public_key",
]
