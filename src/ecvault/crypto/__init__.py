"""Cryptographic operations for ecvault."""

from .curves import (
    CurveDomain,
    all_domains,
    available_key_sizes,
    get_by_identifier,
    get_by_key_size,
)
from .engine import (
    IntegratedEncryption,
    create_key_pair,
    decrypt_ephemeral,
    encrypt_ephemeral,
    envelope_overhead,
    get_engine,
)
from .kdf import DeterministicRandom, derive_key_bytes, derive_password
from .keypair import (
    KeyPair,
    PrivateKey,
    PublicKey,
    derive_public_key,
    validate_keypair,
)
from .obfuscation import deobfuscate, obfuscate
from .params import IESParams, params_for
from .pbe import pbe_decrypt, pbe_encrypt
from .utils import from_base64, to_base64

__all__ = [
    "CurveDomain",
    "DeterministicRandom",
    "IESParams",
    "IntegratedEncryption",
    "KeyPair",
    "PrivateKey",
    "PublicKey",
    "all_domains",
    "available_key_sizes",
    "create_key_pair",
    "decrypt_ephemeral",
    "deobfuscate",
    "derive_key_bytes",
    "derive_password",
    "derive_public_key",
    "encrypt_ephemeral",
    "envelope_overhead",
    "from_base64",
    "get_by_identifier",
    "get_by_key_size",
    "get_engine",
    "obfuscate",
    "params_for",
    "pbe_decrypt",
    "pbe_encrypt",
    "to_base64",
    "validate_keypair",
]
