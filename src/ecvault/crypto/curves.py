"""Named elliptic-curve domains and the curve registry.

Every supported domain is one of the ECC-Brainpool "r1" prime curves
(RFC 5639). Curves are plain data: a single :class:`CurveDomain` type is
populated from the ``_BRAINPOOL_R1`` table when the module is imported, and
the resulting registry is never mutated afterwards, so lookups are safe from
any number of threads.

Point arithmetic is delegated to python-ecdsa (``CurveFp`` / ``PointJacobi``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ecdsa.ellipticcurve import INFINITY, CurveFp, PointJacobi
from ecdsa.errors import MalformedPointError

from ..errors import DomainNotFoundError


@dataclass(frozen=True)
class CurveDomain:
    """One named elliptic-curve group over a prime field.

    Attributes:
        identifier: Unique domain identifier (OID plus key size label).
        key_size: Key size classifier in bits.
        p: Field prime.
        a: Curve coefficient a.
        b: Curve coefficient b.
        gx: Base point x coordinate.
        gy: Base point y coordinate.
        order: Order n of the base point.
    """

    identifier: str
    key_size: int
    p: int
    a: int
    b: int
    gx: int
    gy: int
    order: int
    curve: CurveFp = field(init=False, repr=False, compare=False)
    generator: PointJacobi = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        curve = CurveFp(self.p, self.a, self.b, 1)
        object.__setattr__(self, "curve", curve)
        object.__setattr__(
            self,
            "generator",
            PointJacobi(curve, self.gx, self.gy, 1, self.order, generator=True),
        )

    @property
    def field_size(self) -> int:
        """Length in bytes of a field element."""
        return (self.p.bit_length() + 7) // 8

    @property
    def order_size(self) -> int:
        """Length in bytes of a scalar modulo the group order."""
        return (self.order.bit_length() + 7) // 8

    @property
    def compressed_point_size(self) -> int:
        return 1 + self.field_size

    @property
    def uncompressed_point_size(self) -> int:
        return 1 + 2 * self.field_size

    def multiply_base(self, scalar: int) -> PointJacobi:
        """Compute ``scalar`` times the base point."""
        return self.generator * scalar

    def contains(self, point: PointJacobi) -> bool:
        """Check that ``point`` is a finite point on this curve."""
        if is_infinity(point):
            return False
        return bool(self.curve.contains_point(point.x(), point.y()))

    def encode_point(self, point: PointJacobi, compressed: bool = True) -> bytes:
        """Encode a point in SEC1 form.

        Args:
            point: A finite point on this curve.
            compressed: Use the compressed (``02``/``03``) form.

        Returns:
            The encoded point.

        Raises:
            ValueError: If the point is the point at infinity.
        """
        if is_infinity(point):
            raise ValueError("Cannot encode the point at infinity")
        return bytes(point.to_bytes("compressed" if compressed else "uncompressed"))

    def decode_point(self, data: bytes) -> PointJacobi:
        """Decode a compressed or uncompressed SEC1 point.

        Raises:
            ValueError: If the encoding is invalid or the point is not on the curve.
        """
        if len(data) not in (self.compressed_point_size, self.uncompressed_point_size):
            raise ValueError(
                f"Invalid point encoding length: {len(data)}, expected "
                f"{self.compressed_point_size} or {self.uncompressed_point_size}"
            )
        try:
            point = PointJacobi.from_bytes(
                self.curve,
                bytes(data),
                valid_encodings=("compressed", "uncompressed"),
                order=self.order,
            )
        except MalformedPointError as e:
            raise ValueError(f"Malformed point encoding: {e}") from e
        if not self.contains(point):
            raise ValueError("Point does not lie on the curve")
        return point


def is_infinity(point: PointJacobi) -> bool:
    """Check whether ``point`` is the point at infinity."""
    return bool(point == INFINITY)


# RFC 5639 Brainpool "r1" domain parameters: (identifier, key size, p, a, b, gx, gy, n)
_BRAINPOOL_R1: tuple[tuple[str, int, str, str, str, str, str, str], ...] = (
    (
        "1.3.36.3.3.2.8.1.1.5 (224 bit)",
        224,
        "D7C134AA264366862A18302575D1D787B09F075797DA89F57EC8C0FF",
        "68A5E62CA9CE6C1C299803A6C1530B514E182AD8B0042A59CAD29F43",
        "2580F63CCFE44138870713B1A92369E33E2135D266DBB372386C400B",
        "0D9029AD2C7E5CF4340823B2A87DC68C9E4CE3174C1E6EFDEE12C07D",
        "58AA56F772C0726F24C6B89E4ECDAC24354B9E99CAA3F6D3761402CD",
        "D7C134AA264366862A18302575D0FB98D116BC4B6DDEBCA3A5A7939F",
    ),
    (
        "1.3.36.3.3.2.8.1.1.7 (256 bit)",
        256,
        "A9FB57DBA1EEA9BC3E660A909D838D726E3BF623D52620282013481D1F6E5377",
        "7D5A0975FC2C3057EEF67530417AFFE7FB8055C126DC5C6CE94A4B44F330B5D9",
        "26DC5C6CE94A4B44F330B5D9BBD77CBF958416295CF7E1CE6BCCDC18FF8C07B6",
        "8BD2AEB9CB7E57CB2C4B482FFC81B7AFB9DE27E1E3BD23C23A4453BD9ACE3262",
        "547EF835C3DAC4FD97F8461A14611DC9C27745132DED8E545C1D54C72F046997",
        "A9FB57DBA1EEA9BC3E660A909D838D718C397AA3B561A6F7901E0E82974856A7",
    ),
    (
        "1.3.36.3.3.2.8.1.1.9 (320 bit)",
        320,
        "D35E472036BC4FB7E13C785ED201E065F98FCFA6F6F40DEF4F92B9EC7893EC28FCD412B1F1B32E27",
        "3EE30B568FBAB0F883CCEBD46D3F3BB8A2A73513F5EB79DA66190EB085FFA9F492F375A97D860EB4",
        "520883949DFDBC42D3AD198640688A6FE13F41349554B49ACC31DCCD884539816F5EB4AC8FB1F1A6",
        "43BD7E9AFB53D8B85289BCC48EE5BFE6F20137D10A087EB6E7871E2A10A599C710AF8D0D39E20611",
        "14FDD05545EC1CC8AB4093247F77275E0743FFED117182EAA9C77877AAAC6AC7D35245D1692E8EE1",
        "D35E472036BC4FB7E13C785ED201E065F98FCFA5B68F12A32D482EC7EE8658E98691555B44C59311",
    ),
    (
        "1.3.36.3.3.2.8.1.1.11 (384 bit)",
        384,
        "8CB91E82A3386D280F5D6F7E50E641DF152F7109ED5456B412B1DA197FB71123"
        "ACD3A729901D1A71874700133107EC53",
        "7BC382C63D8C150C3C72080ACE05AFA0C2BEA28E4FB22787139165EFBA91F90F"
        "8AA5814A503AD4EB04A8C7DD22CE2826",
        "04A8C7DD22CE28268B39B55416F0447C2FB77DE107DCD2A62E880EA53EEB62D5"
        "7CB4390295DBC9943AB78696FA504C11",
        "1D1C64F068CF45FFA2A63A81B7C13F6B8847A3E77EF14FE3DB7FCAFE0CBD10E8"
        "E826E03436D646AAEF87B2E247D4AF1E",
        "8ABE1D7520F9C2A45CB1EB8E95CFD55262B70B29FEEC5864E19C054FF9912928"
        "0E4646217791811142820341263C5315",
        "8CB91E82A3386D280F5D6F7E50E641DF152F7109ED5456B31F166E6CAC0425A7"
        "CF3AB6AF6B7FC3103B883202E9046565",
    ),
    (
        "1.3.36.3.3.2.8.1.1.13 (512 bit)",
        512,
        "AADD9DB8DBE9C48B3FD4E6AE33C9FC07CB308DB3B3C9D20ED6639CCA70330871"
        "7D4D9B009BC66842AECDA12AE6A380E62881FF2F2D82C68528AA6056583A48F3",
        "7830A3318B603B89E2327145AC234CC594CBDD8D3DF91610A83441CAEA9863BC"
        "2DED5D5AA8253AA10A2EF1C98B9AC8B57F1117A72BF2C7B9E7C1AC4D77FC94CA",
        "3DF91610A83441CAEA9863BC2DED5D5AA8253AA10A2EF1C98B9AC8B57F1117A7"
        "2BF2C7B9E7C1AC4D77FC94CADC083E67984050B75EBAE5DD2809BD638016F723",
        "81AEE4BDD82ED9645A21322E9C4C6A9385ED9F70B5D916C1B43B62EEF4D0098E"
        "FF3B1F78E2D0D48D50D1687B93B97D5F7C6D5047406A5E688B352209BCB9F822",
        "7DDE385D566332ECC0EABFA9CF7822FDF209F70024A57B1AA000C55B881F8111"
        "B2DCDE494A5F485E5BCA4BD88A2763AED1CA2B2FA8F0540678CD1E0F3AD80892",
        "AADD9DB8DBE9C48B3FD4E6AE33C9FC07CB308DB3B3C9D20ED6639CCA70330870"
        "553E5C414CA92619418661197FAC10471DB1D381085DDADDB58796829CA90069",
    ),
)


def _build_registry() -> tuple[Mapping[str, CurveDomain], Mapping[int, CurveDomain]]:
    by_identifier: dict[str, CurveDomain] = {}
    by_key_size: dict[int, CurveDomain] = {}
    for identifier, key_size, *numbers in _BRAINPOOL_R1:
        p, a, b, gx, gy, order = (int(n, 16) for n in numbers)
        domain = CurveDomain(identifier, key_size, p, a, b, gx, gy, order)
        if identifier in by_identifier or key_size in by_key_size:
            raise RuntimeError(f"Duplicate curve domain: {identifier}")
        by_identifier[identifier] = domain
        by_key_size[key_size] = domain
    return MappingProxyType(by_identifier), MappingProxyType(by_key_size)


_BY_IDENTIFIER, _BY_KEY_SIZE = _build_registry()


def get_by_identifier(identifier: str) -> CurveDomain:
    """Look up a curve domain by its identifier.

    Args:
        identifier: The domain identifier, e.g. ``"1.3.36.3.3.2.8.1.1.9 (320 bit)"``.

    Returns:
        The matching CurveDomain.

    Raises:
        DomainNotFoundError: If the identifier is unknown.
    """
    try:
        return _BY_IDENTIFIER[identifier]
    except KeyError:
        raise DomainNotFoundError(identifier) from None


def get_by_key_size(key_size: int) -> CurveDomain:
    """Look up a curve domain by its key size in bits.

    Raises:
        DomainNotFoundError: If no domain has that key size.
    """
    try:
        return _BY_KEY_SIZE[key_size]
    except KeyError:
        raise DomainNotFoundError(key_size) from None


def available_key_sizes() -> list[int]:
    """Return the supported key sizes in ascending order."""
    return sorted(_BY_KEY_SIZE)


def all_domains() -> list[CurveDomain]:
    """Return every registered domain ordered by key size."""
    return [_BY_KEY_SIZE[size] for size in available_key_sizes()]
