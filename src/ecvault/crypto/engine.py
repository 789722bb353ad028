"""Elliptic-curve integrated encryption (ECIES) with ephemeral sender keys.

Envelope layout, with all lengths fixed by the receiver's curve domain::

    ephemeral public key (compressed) || AES-256-CFB8 ciphertext || MAC tag

Encryption:
  1. Generate an ephemeral key pair (k, V = k*G) on the receiver's domain.
  2. Z = x coordinate of k*Q (ECDH with the receiver public key Q).
  3. K = KDF2/X9.63 over SHA3-512 of V || Z with the derivation parameter
     as shared info; K1 is the AES key, K2 the HMAC key.
  4. C = AES-256-CFB8(K1, zero IV) of the plaintext.
  5. T = HMAC(K2, C || encoding parameter || bit length of the encoding
     parameter), truncated to the domain's MAC size.

Decryption recomputes K from V and the receiver private key and checks the
tag in constant time before anything is decrypted.
"""

from __future__ import annotations

import hmac
import logging
import os
from collections.abc import Callable

from cryptography.hazmat.primitives import hmac as crypto_hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.x963kdf import X963KDF
from ecdsa.ellipticcurve import PointJacobi

from ..constants import DEFAULT_KEY_SIZE
from ..errors import (
    AuthenticationError,
    DomainNotFoundError,
    MalformedEnvelopeError,
)
from .constants import AES_BLOCK_SIZE, IES_DERIVATION, IES_ENCODING
from .curves import CurveDomain, get_by_key_size, is_infinity
from .keypair import KeyPair, PrivateKey, PublicKey
from .params import IESParams, params_for
from .utils import bytes_to_int, int_to_bytes

logger = logging.getLogger("ecvault")

RandFunc = Callable[[int], bytes]

# Bit length of the MAC encoding parameter, appended to the MAC input
_ENCODING_LENGTH_TAG = (len(IES_ENCODING) * 8).to_bytes(8, "big")


def random_scalar(domain: CurveDomain, randfunc: RandFunc | None = None) -> int:
    """Draw a uniformly random private scalar in ``[1, n - 1]``.

    Reads ``ceil(bits(n) / 8)`` bytes per attempt, clears the surplus high
    bits and retries until the value is in range.

    Args:
        domain: The curve domain.
        randfunc: Byte source, ``os.urandom`` when None.

    Returns:
        The scalar.
    """
    randfunc = randfunc or os.urandom
    bits = domain.order.bit_length()
    nbytes = (bits + 7) // 8
    excess = 8 * nbytes - bits
    while True:
        data = bytearray(randfunc(nbytes))
        if len(data) != nbytes:
            raise ValueError(f"Random source returned {len(data)} bytes, expected {nbytes}")
        data[0] &= 0xFF >> excess
        d = bytes_to_int(bytes(data))
        if 0 < d < domain.order:
            return d


def _shared_secret(domain: CurveDomain, scalar: int, point: PointJacobi) -> bytes:
    shared = point * scalar
    if is_infinity(shared):
        raise ValueError("ECDH produced the point at infinity")
    return int_to_bytes(shared.x(), domain.field_size)


def _derive_keys(params: IESParams, ephemeral: bytes, shared: bytes) -> tuple[bytes, bytes]:
    kdf = X963KDF(
        algorithm=params.kdf_hash(),
        length=params.cipher_key_size + params.mac_key_size,
        sharedinfo=IES_DERIVATION,
    )
    key = kdf.derive(ephemeral + shared)
    return key[: params.cipher_key_size], key[params.cipher_key_size :]


def _compute_tag(params: IESParams, mac_key: bytes, ciphertext: bytes) -> bytes:
    mac = crypto_hmac.HMAC(mac_key, params.mac_hash())
    mac.update(ciphertext)
    mac.update(IES_ENCODING)
    mac.update(_ENCODING_LENGTH_TAG)
    return mac.finalize()[: params.mac_size]


def _cfb8(key: bytes, data: bytes, for_encryption: bool) -> bytes:
    cipher = Cipher(algorithms.AES(key), modes.CFB8(b"\x00" * AES_BLOCK_SIZE))
    ctx = cipher.encryptor() if for_encryption else cipher.decryptor()
    return ctx.update(data) + ctx.finalize()


def envelope_overhead(key_size: int) -> int:
    """Number of bytes an envelope adds to the plaintext for a key size.

    Raises:
        DomainNotFoundError: If the key size is unsupported.
    """
    domain = get_by_key_size(key_size)
    return domain.compressed_point_size + params_for(key_size).mac_size


def encrypt_ephemeral(
    plaintext: bytes,
    receiver_public_key: PublicKey,
    randfunc: RandFunc | None = None,
) -> bytes:
    """Encrypt bytes to a receiver public key.

    Args:
        plaintext: The bytes to encrypt (may be empty).
        receiver_public_key: The receiver's public key.
        randfunc: Byte source for the ephemeral key, ``os.urandom`` when None.

    Returns:
        The envelope ``V || C || T``.

    Raises:
        DomainNotFoundError: If the key's domain is unknown.
        ValueError: If the receiver public key is not a valid point.
    """
    if plaintext is None:
        raise TypeError("plaintext must not be None")
    if receiver_public_key is None:
        raise TypeError("receiver_public_key must not be None")

    domain = receiver_public_key.domain
    params = params_for(domain.key_size)
    receiver_point = receiver_public_key.point

    ephemeral_scalar = random_scalar(domain, randfunc)
    ephemeral = domain.encode_point(domain.multiply_base(ephemeral_scalar), compressed=True)
    shared = _shared_secret(domain, ephemeral_scalar, receiver_point)
    cipher_key, mac_key = _derive_keys(params, ephemeral, shared)
    del ephemeral_scalar, shared

    ciphertext = _cfb8(cipher_key, bytes(plaintext), for_encryption=True)
    tag = _compute_tag(params, mac_key, ciphertext)

    logger.debug("Encrypted %d bytes on domain %s", len(plaintext), domain.identifier)
    return ephemeral + ciphertext + tag


def decrypt_ephemeral(envelope: bytes, receiver_private_key: PrivateKey) -> bytes:
    """Decrypt an envelope with the receiver private key.

    CRITICAL: The tag is verified BEFORE decryption and no plaintext is
    returned when verification fails.

    Args:
        envelope: The envelope produced by :func:`encrypt_ephemeral`.
        receiver_private_key: The receiver's private key.

    Returns:
        The decrypted plaintext.

    Raises:
        DomainNotFoundError: If the key's domain is unknown.
        MalformedEnvelopeError: If the envelope is too short or its ephemeral
            key does not decode to a point on the receiver's curve.
        AuthenticationError: If authentication fails for any other reason.
    """
    if envelope is None:
        raise TypeError("envelope must not be None")
    if receiver_private_key is None:
        raise TypeError("receiver_private_key must not be None")

    domain = receiver_private_key.domain
    params = params_for(domain.key_size)
    point_size = domain.compressed_point_size
    if len(envelope) < point_size + params.mac_size:
        raise MalformedEnvelopeError(
            f"Envelope too short: {len(envelope)} bytes, expected at least "
            f"{point_size + params.mac_size}"
        )

    envelope = bytes(envelope)
    ephemeral = envelope[:point_size]
    ciphertext = envelope[point_size : len(envelope) - params.mac_size]
    tag = envelope[len(envelope) - params.mac_size :]

    try:
        ephemeral_point = domain.decode_point(ephemeral)
    except ValueError as e:
        raise MalformedEnvelopeError(f"Invalid ephemeral public key: {e}") from e

    try:
        shared = _shared_secret(domain, receiver_private_key.scalar, ephemeral_point)
        cipher_key, mac_key = _derive_keys(params, ephemeral, shared)
        del shared
        expected = _compute_tag(params, mac_key, ciphertext)
    except (DomainNotFoundError, AuthenticationError):
        raise
    except Exception as e:
        raise AuthenticationError("Authentication failed") from e

    if not hmac.compare_digest(tag, expected):
        raise AuthenticationError("Authentication failed")

    return _cfb8(cipher_key, ciphertext, for_encryption=False)


def create_key_pair(
    key_size: int = DEFAULT_KEY_SIZE,
    randfunc: RandFunc | None = None,
) -> KeyPair:
    """Create a new key pair.

    Pass a :class:`~ecvault.crypto.kdf.DeterministicRandom` as ``randfunc``
    to get the same key pair for the same seed every time.

    Args:
        key_size: Key size in bits (224, 256, 320, 384 or 512).
        randfunc: Byte source, ``os.urandom`` when None.

    Returns:
        A KeyPair with an uncompressed public key.

    Raises:
        DomainNotFoundError: If the key size is unsupported.
    """
    domain = get_by_key_size(key_size)
    d = random_scalar(domain, randfunc)
    public = domain.encode_point(domain.multiply_base(d), compressed=False)
    logger.debug("Created key pair on domain %s", domain.identifier)
    return KeyPair(
        private_key=PrivateKey(d, domain.identifier),
        public_key=PublicKey(public, domain.identifier),
    )


class IntegratedEncryption:
    """Stateless ECIES facade.

    Holds no mutable state, so one instance can be shared between threads.
    The only shared resource is a caller-supplied ``randfunc``, which must be
    thread-safe itself when used concurrently.
    """

    def encrypt_ephemeral(
        self,
        plaintext: bytes,
        public_key: PublicKey,
        randfunc: RandFunc | None = None,
    ) -> bytes:
        return encrypt_ephemeral(plaintext, public_key, randfunc)

    def decrypt_ephemeral(self, envelope: bytes, private_key: PrivateKey) -> bytes:
        return decrypt_ephemeral(envelope, private_key)

    def create_key_pair(
        self,
        key_size: int = DEFAULT_KEY_SIZE,
        randfunc: RandFunc | None = None,
    ) -> KeyPair:
        return create_key_pair(key_size, randfunc)


_ENGINE = IntegratedEncryption()


def get_engine() -> IntegratedEncryption:
    """Return the shared :class:`IntegratedEncryption` instance."""
    return _ENGINE
