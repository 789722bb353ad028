"""ecvault - elliptic-curve integrated encryption with password-protected keystores.

Hybrid public-key encryption (ECIES) over the Brainpool r1 curves, plus an
XML keystore format that keeps the receiver's private key encrypted under a
password and the sender's public key in the clear.

Example:
    ```python
    from ecvault import GeneratorConfig, generate_keystores, get_engine
    from ecvault import load_private_key, load_public_key

    files = generate_keystores(GeneratorConfig(target_dir="keys", password="pw1"))

    engine = get_engine()
    envelope = engine.encrypt_ephemeral(b"hello", load_public_key(files.encoder_keystore))
    plaintext = engine.decrypt_ephemeral(
        envelope, load_private_key(files.decoder_keystore, "pw1")
    )
    ```
"""

from .constants import (
    DECODER_KEYSTORE_NAME,
    DEFAULT_KEY_SIZE,
    DEFAULT_PBKDF_ITERATIONS,
    ENCODER_KEYSTORE_NAME,
    PASSWORDS_FILE_NAME,
    STORE_PASSWORD_LENGTH,
)
from .crypto import (
    CurveDomain,
    DeterministicRandom,
    IESParams,
    IntegratedEncryption,
    KeyPair,
    PrivateKey,
    PublicKey,
    available_key_sizes,
    create_key_pair,
    decrypt_ephemeral,
    deobfuscate,
    derive_key_bytes,
    derive_password,
    encrypt_ephemeral,
    get_by_identifier,
    get_by_key_size,
    get_engine,
    obfuscate,
    params_for,
    pbe_decrypt,
    pbe_encrypt,
)
from .errors import (
    AuthenticationError,
    DomainNotFoundError,
    EcVaultError,
    InvalidCipherBytesError,
    InvalidPasswordError,
    KeyStorageError,
    MalformedEnvelopeError,
    NoSuchKeyError,
)
from .keystorage import (
    PrivateKeyStore,
    PublicKeyStore,
    SecretKey,
    SecretKeyStore,
    generate_keystores,
    load_private_key,
    load_public_key,
)
from .types import GeneratorConfig, KeystoreFiles

__version__ = "0.1.0"

__all__ = [
    # Engine
    "IntegratedEncryption",
    "get_engine",
    "encrypt_ephemeral",
    "decrypt_ephemeral",
    "create_key_pair",
    # Keys and domains
    "CurveDomain",
    "IESParams",
    "KeyPair",
    "PrivateKey",
    "PublicKey",
    "available_key_sizes",
    "get_by_identifier",
    "get_by_key_size",
    "params_for",
    # Password utilities
    "DeterministicRandom",
    "derive_key_bytes",
    "derive_password",
    "pbe_encrypt",
    "pbe_decrypt",
    "obfuscate",
    "deobfuscate",
    # Keystores
    "SecretKey",
    "SecretKeyStore",
    "PrivateKeyStore",
    "PublicKeyStore",
    "generate_keystores",
    "load_private_key",
    "load_public_key",
    # Configuration
    "GeneratorConfig",
    "KeystoreFiles",
    # Constants
    "DEFAULT_KEY_SIZE",
    "DEFAULT_PBKDF_ITERATIONS",
    "STORE_PASSWORD_LENGTH",
    "ENCODER_KEYSTORE_NAME",
    "DECODER_KEYSTORE_NAME",
    "PASSWORDS_FILE_NAME",
    # Errors
    "EcVaultError",
    "DomainNotFoundError",
    "MalformedEnvelopeError",
    "AuthenticationError",
    "InvalidPasswordError",
    "InvalidCipherBytesError",
    "NoSuchKeyError",
    "KeyStorageError",
    # Version
    "__version__",
]
