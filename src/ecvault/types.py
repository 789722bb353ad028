"""Type definitions for ecvault."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_KEY_SIZE


@dataclass
class GeneratorConfig:
    """Configuration for generating a keystore pair.

    Attributes:
        target_dir: Existing directory the keystore files are written to.
        file_prefix: Optional prefix for the file names, joined with "_".
        password: Password protecting the private keystore. None uses a
            built-in default, which only obscures the private key.
        seed: Optional seed. The same seed always produces the same key pair.
        comments: Optional comment embedded in both keystores.
        key_size: Key size in bits (224, 256, 320, 384 or 512).
    """

    target_dir: Path | str
    file_prefix: str | None = None
    password: str | None = None
    seed: str | None = None
    comments: str | None = None
    key_size: int = DEFAULT_KEY_SIZE


@dataclass
class KeystoreFiles:
    """Paths written by a keystore generation run.

    Attributes:
        encoder_keystore: Public keystore, used by the sender to encrypt.
        decoder_keystore: Private keystore, used by the receiver to decrypt.
        passwords_file: Plain text record of the password and seed.
        backup_suffix: Suffix appended to files that were renamed out of the
            way, or None if nothing had to be backed up.
    """

    encoder_keystore: Path
    decoder_keystore: Path
    passwords_file: Path
    backup_suffix: str | None = None
