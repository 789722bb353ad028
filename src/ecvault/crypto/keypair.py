"""EC key value types and key pair helpers for ecvault."""

from __future__ import annotations

from dataclasses import dataclass, field

from ecdsa.ellipticcurve import PointJacobi

from .curves import CurveDomain, get_by_identifier
from .utils import bytes_to_int, int_to_bytes


@dataclass(frozen=True)
class PrivateKey:
    """EC private key bound to a curve domain.

    Attributes:
        scalar: The private scalar d, 1 <= d < n.
        algorithm: Identifier of the curve domain.
    """

    scalar: int = field(repr=False)
    algorithm: str

    def __post_init__(self) -> None:
        domain = get_by_identifier(self.algorithm)
        if not 0 < self.scalar < domain.order:
            raise ValueError(f"Private scalar out of range for {self.algorithm}")

    @property
    def domain(self) -> CurveDomain:
        return get_by_identifier(self.algorithm)

    @property
    def encoded(self) -> bytes:
        """Fixed-length big-endian encoding of the scalar."""
        return int_to_bytes(self.scalar, self.domain.order_size)

    @classmethod
    def from_encoded(cls, data: bytes, algorithm: str) -> PrivateKey:
        """Rebuild a private key from its raw encoding.

        Leading zero bytes are accepted, so both fixed-length and minimal
        two's-complement encodings decode to the same key.

        Raises:
            DomainNotFoundError: If the algorithm is unknown.
            ValueError: If the scalar is out of range.
        """
        return cls(bytes_to_int(data), algorithm)


@dataclass(frozen=True)
class PublicKey:
    """EC public key bound to a curve domain.

    The point is checked against the domain's curve on construction.

    Attributes:
        encoded: SEC1 point encoding (compressed or uncompressed).
        algorithm: Identifier of the curve domain.
    """

    encoded: bytes
    algorithm: str

    def __post_init__(self) -> None:
        self.domain.decode_point(self.encoded)

    @property
    def domain(self) -> CurveDomain:
        return get_by_identifier(self.algorithm)

    @property
    def point(self) -> PointJacobi:
        """The decoded curve point.

        Raises:
            ValueError: If the encoding is not a valid point on the domain's curve.
        """
        return self.domain.decode_point(self.encoded)

    def compressed(self) -> PublicKey:
        """Return the same key in compressed point form."""
        domain = self.domain
        return PublicKey(domain.encode_point(self.point, compressed=True), self.algorithm)

    @classmethod
    def from_encoded(cls, data: bytes, algorithm: str) -> PublicKey:
        """Rebuild a public key from a point encoding.

        Raises:
            DomainNotFoundError: If the algorithm is unknown.
            ValueError: If the encoding is not a point on the curve.
        """
        return cls(bytes(data), algorithm)


@dataclass(frozen=True)
class KeyPair:
    """A private key and its public key on the same domain.

    Attributes:
        private_key: The receiver's private key.
        public_key: The receiver's public key.
    """

    private_key: PrivateKey
    public_key: PublicKey

    def __post_init__(self) -> None:
        if self.private_key is None or self.public_key is None:
            raise TypeError("private_key and public_key must not be None")
        if self.private_key.algorithm != self.public_key.algorithm:
            raise ValueError(f"{self.private_key.algorithm} != {self.public_key.algorithm}")

    @property
    def algorithm(self) -> str:
        return self.public_key.algorithm


def derive_public_key(private_key: PrivateKey, compressed: bool = False) -> PublicKey:
    """Compute the public key belonging to a private key.

    Args:
        private_key: The private key.
        compressed: Encode the point in compressed form.

    Returns:
        The matching PublicKey.
    """
    domain = private_key.domain
    point = domain.multiply_base(private_key.scalar)
    return PublicKey(domain.encode_point(point, compressed=compressed), private_key.algorithm)


def validate_keypair(keypair: KeyPair) -> bool:
    """Validate that a key pair is consistent.

    Args:
        keypair: The key pair to validate.

    Returns:
        True if the public point lies on the curve and equals d*G, False otherwise.
    """
    try:
        point = keypair.public_key.point
    except ValueError:
        return False
    expected = keypair.private_key.domain.multiply_base(keypair.private_key.scalar)
    return bool(point == expected)
