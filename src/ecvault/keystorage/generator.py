"""Creation and loading of encoder/decoder keystore pairs.

A generation run writes three files into the target directory:

- ``<prefix_>encoder_keystore.xml``: the public key, for senders.
- ``<prefix_>decoder_keystore.xml``: the password-protected private key,
  for the receiver.
- ``<prefix_>passwords.txt``: the password and seed in plain text, so
  they can be checked later. Keep it somewhere safe or delete it.

Files that already exist are renamed with a shared random suffix first.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from ..constants import (
    DECODER_KEYSTORE_NAME,
    ENCODER_KEYSTORE_NAME,
    PASSWORDS_FILE_NAME,
    STORE_PASSWORD_LENGTH,
)
from ..crypto.curves import get_by_key_size
from ..crypto.engine import create_key_pair
from ..crypto.kdf import DeterministicRandom, derive_password
from ..crypto.keypair import PrivateKey, PublicKey
from ..errors import KeyStorageError
from ..types import GeneratorConfig, KeystoreFiles
from .ecc_store import PrivateKeyStore, PublicKeyStore
from .xml_store import check_text

logger = logging.getLogger("ecvault")


def _validate_config(config: GeneratorConfig) -> Path:
    if config.target_dir is None:
        raise ValueError("Target directory is None")
    target_dir = Path(config.target_dir)
    if not target_dir.is_dir():
        raise ValueError(f"{target_dir.resolve()} is not a directory")
    if config.password is not None and config.password == "":
        raise ValueError("Decryption keystore password is empty")
    if config.seed is not None and config.seed == "":
        raise ValueError("Seed for keystore generation is empty")
    if config.comments is not None:
        check_text(config.comments)
    get_by_key_size(config.key_size)
    return target_dir


def _file_prefix(prefix: str | None) -> str:
    if prefix and prefix.strip():
        return prefix.strip() + "_"
    return ""


def _backup(path: Path, suffix: str) -> bool:
    if not path.exists():
        return False
    backup = path.with_name(f"{path.name}.{suffix}")
    try:
        path.rename(backup)
    except OSError as e:
        raise KeyStorageError(f"Could not rename existing file {path}: {e}") from e
    logger.debug("Renamed existing %s to %s", path, backup.name)
    return True


def _write_passwords_file(path: Path, password: str | None, seed: str | None) -> None:
    lines = [
        f"Decryption Keystore password: [{password}]"
        if password is not None
        else "No Decryption Keystore password.",
        f"Seed password: [{seed}]" if seed is not None else "No Seed.",
    ]
    try:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        raise KeyStorageError(f"Failed to write {path}: {e}") from e


def generate_keystores(config: GeneratorConfig) -> KeystoreFiles:
    """Generate a key pair and write it as an encoder/decoder keystore pair.

    With ``config.seed`` set the key pair is derived from the seed and is
    the same on every run; otherwise it is random.

    Args:
        config: Generation settings.

    Returns:
        The paths that were written.

    Raises:
        ValueError: If the target directory does not exist or the password
            or seed is given but empty.
        DomainNotFoundError: If the key size is unsupported.
        KeyStorageError: If a file cannot be renamed or written.
    """
    target_dir = _validate_config(config)
    prefix = _file_prefix(config.file_prefix)

    files = KeystoreFiles(
        encoder_keystore=target_dir / (prefix + ENCODER_KEYSTORE_NAME),
        decoder_keystore=target_dir / (prefix + DECODER_KEYSTORE_NAME),
        passwords_file=target_dir / (prefix + PASSWORDS_FILE_NAME),
    )

    suffix = str(uuid.uuid4())
    backed_up = [
        _backup(path, suffix)
        for path in (files.encoder_keystore, files.decoder_keystore, files.passwords_file)
    ]
    if any(backed_up):
        files.backup_suffix = suffix

    randfunc = DeterministicRandom(config.seed) if config.seed is not None else None
    keypair = create_key_pair(config.key_size, randfunc)
    store_password = derive_password(config.password, STORE_PASSWORD_LENGTH)

    public_store = PublicKeyStore(files.encoder_keystore)
    public_store.set_public_key(keypair.public_key)
    private_store = PrivateKeyStore(files.decoder_keystore)
    private_store.set_private_key(keypair.private_key, store_password)

    public_store.store(config.comments)
    private_store.store(config.comments)
    _write_passwords_file(files.passwords_file, config.password, config.seed)

    logger.debug(
        "Generated %d-bit keystore pair in %s (%s)",
        config.key_size,
        target_dir,
        "deterministic" if config.seed is not None else "random",
    )
    return files


def load_private_key(path: str | os.PathLike[str], password: str | None = None) -> PrivateKey:
    """Load the private key from a decoder keystore.

    Args:
        path: The decoder keystore file.
        password: The password given at generation time, or None if none was.

    Returns:
        The private key.

    Raises:
        KeyStorageError: If the file cannot be read or is an encoder keystore.
        NoSuchKeyError: If the file holds no private key.
        InvalidPasswordError: If the password is wrong.
    """
    store = PrivateKeyStore(path)
    store.load()
    return store.get_private_key(derive_password(password, STORE_PASSWORD_LENGTH))


def load_public_key(path: str | os.PathLike[str]) -> PublicKey:
    """Load the public key from an encoder keystore.

    Raises:
        KeyStorageError: If the file cannot be read or is a decoder keystore.
        NoSuchKeyError: If the file holds no public key.
    """
    store = PublicKeyStore(path)
    store.load()
    return store.get_public_key()
