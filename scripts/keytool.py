#!/usr/bin/env python3
"""Keytool CLI for generating ecvault keystores and encrypting with them."""

import argparse
import json
import logging
import sys

from ecvault import (
    DEFAULT_KEY_SIZE,
    EcVaultError,
    GeneratorConfig,
    generate_keystores,
    get_engine,
    load_private_key,
    load_public_key,
)
from ecvault.crypto.utils import from_base64, to_base64


def generate(args: argparse.Namespace) -> None:
    """Generate a keystore pair and output the written paths as JSON."""
    files = generate_keystores(
        GeneratorConfig(
            target_dir=args.dir,
            file_prefix=args.prefix,
            password=args.password,
            seed=args.seed,
            comments=args.comments,
            key_size=args.key_size,
        )
    )
    output = {
        "encoderKeystore": str(files.encoder_keystore),
        "decoderKeystore": str(files.decoder_keystore),
        "passwordsFile": str(files.passwords_file),
        "backupSuffix": files.backup_suffix,
    }
    print(json.dumps(output))


def encrypt(args: argparse.Namespace) -> None:
    """Encrypt stdin to the keystore's public key and output base64."""
    public_key = load_public_key(args.keystore)
    plaintext = sys.stdin.buffer.read()
    envelope = get_engine().encrypt_ephemeral(plaintext, public_key)
    print(to_base64(envelope))


def decrypt(args: argparse.Namespace) -> None:
    """Decrypt a base64 envelope from stdin and write the plaintext to stdout."""
    private_key = load_private_key(args.keystore, args.password)
    envelope = from_base64(sys.stdin.read())
    sys.stdout.buffer.write(get_engine().decrypt_ephemeral(envelope, private_key))
    sys.stdout.buffer.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keytool.py", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="create an encoder/decoder keystore pair")
    gen.add_argument("dir", help="existing target directory")
    gen.add_argument("--prefix", help="file name prefix")
    gen.add_argument("--password", help="decoder keystore password")
    gen.add_argument("--seed", help="seed for repeatable key generation")
    gen.add_argument("--comments", help="comment embedded in both keystores")
    gen.add_argument("--key-size", type=int, default=DEFAULT_KEY_SIZE, help="key size in bits")
    gen.set_defaults(func=generate)

    enc = commands.add_parser("encrypt", help="encrypt stdin with an encoder keystore")
    enc.add_argument("keystore", help="encoder keystore file")
    enc.set_defaults(func=encrypt)

    dec = commands.add_parser("decrypt", help="decrypt stdin with a decoder keystore")
    dec.add_argument("keystore", help="decoder keystore file")
    dec.add_argument("--password", help="decoder keystore password")
    dec.set_defaults(func=decrypt)

    return parser


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        args.func(args)
    except (EcVaultError, ValueError) as e:
        print(f"{args.command} failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
