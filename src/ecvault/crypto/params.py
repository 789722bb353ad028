"""ECIES parametrization as a function of the EC key size.

The MAC strength tracks the strength of the curve: the MAC tag is as wide as
the key size and the HMAC key is as long as the block size of the hash used
for the MAC. The KDF always uses a 512-bit digest and the cipher is always
AES-256.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes

from .constants import CIPHER_KEY_BITS, KDF_DIGEST_BITS

logger = logging.getLogger("ecvault")

HashFactory = Callable[[], hashes.HashAlgorithm]


@dataclass(frozen=True)
class IESParams:
    """ECIES parameters for one key size.

    Attributes:
        key_size: The EC key size in bits this record applies to.
        kdf_digest_bits: Output width of the KDF digest.
        mac_digest_bits: Width of the (possibly truncated) MAC tag.
        mac_key_bits: HMAC key length, equal to the MAC hash block size.
        cipher_key_bits: Symmetric cipher key length.
        kdf_hash: Factory for the KDF hash algorithm.
        mac_hash: Factory for the MAC hash algorithm.
    """

    key_size: int
    kdf_digest_bits: int
    mac_digest_bits: int
    mac_key_bits: int
    cipher_key_bits: int
    kdf_hash: HashFactory
    mac_hash: HashFactory

    @property
    def mac_size(self) -> int:
        """MAC tag length in bytes."""
        return self.mac_digest_bits // 8

    @property
    def mac_key_size(self) -> int:
        return self.mac_key_bits // 8

    @property
    def cipher_key_size(self) -> int:
        return self.cipher_key_bits // 8


def _record(
    key_size: int, mac_hash: HashFactory, mac_digest_bits: int, block_size: int
) -> IESParams:
    return IESParams(
        key_size=key_size,
        kdf_digest_bits=KDF_DIGEST_BITS,
        mac_digest_bits=mac_digest_bits,
        mac_key_bits=block_size * 8,
        cipher_key_bits=CIPHER_KEY_BITS,
        kdf_hash=hashes.SHA3_512,
        mac_hash=mac_hash,
    )


_PARAMS: dict[int, IESParams] = {
    224: _record(224, hashes.SHA512_224, 224, block_size=128),
    256: _record(256, hashes.SHA256, 256, block_size=64),
    # SHA-512 tag truncated to 320 bits
    320: _record(320, hashes.SHA512, 320, block_size=128),
    384: _record(384, hashes.SHA3_384, 384, block_size=104),
    512: _record(512, hashes.SHA3_512, 512, block_size=72),
}

DEFAULT_PARAMS = _PARAMS[512]


def params_for(key_size: int) -> IESParams:
    """Return the ECIES parameters for an EC key size.

    Unknown key sizes get the strongest (512-bit) record.

    Args:
        key_size: The EC key size in bits.

    Returns:
        The matching IESParams.
    """
    params = _PARAMS.get(key_size)
    if params is None:
        logger.warning(
            "No ECIES parameters for key size %s, falling back to %s-bit parameters",
            key_size,
            DEFAULT_PARAMS.key_size,
        )
        return DEFAULT_PARAMS
    return params
