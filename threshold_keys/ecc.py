"""Affine point arithmetic on secp256k1 (y^2 = x^3 + 7 over F_p)."""

from threshold_keys.errors import InvalidPublicKey
from threshold_keys.field import N, P, FieldElement

B = 7
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8


def _curve_rhs(x: FieldElement) -> FieldElement:
    return x ** 3 + B


class Point:
    """A curve point with integer coordinates, or the point at infinity.

    Coordinates are plain ints in [0, P); ``x is None`` marks infinity.
    """

    __slots__ = ("x", "y")

    def __init__(self, x, y):
        if x is None or y is None:
            if (x, y) != (None, None):
                raise ValueError("Both coordinates must be None for the point at infinity")
        elif not (0 <= x < P and 0 <= y < P):
            raise ValueError(f"Coordinates ({x}, {y}) are outside the field")
        elif FieldElement(y) ** 2 != _curve_rhs(FieldElement(x)):
            raise ValueError(f"Point ({x}, {y}) is not on secp256k1")
        self.x = x
        self.y = y

    @classmethod
    def infinity(cls):
        return cls(None, None)

    @property
    def is_infinity(self):
        return self.x is None

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return (self.x, self.y) == (other.x, other.y)

    def __hash__(self):
        return hash((self.x, self.y))

    def __add__(self, other):
        if self.is_infinity:
            return other
        if other.is_infinity:
            return self

        x1, y1 = FieldElement(self.x), FieldElement(self.y)
        x2, y2 = FieldElement(other.x), FieldElement(other.y)
        if x1 == x2:
            # P + (-P), including doubling a point with y = 0.
            if y1 != y2 or y1.value == 0:
                return Point.infinity()
            slope = (3 * x1 * x1) / (2 * y1)
        else:
            slope = (y2 - y1) / (x2 - x1)

        x3 = slope * slope - x1 - x2
        y3 = slope * (x1 - x3) - y1
        return Point(x3.value, y3.value)

    def __neg__(self):
        if self.is_infinity:
            return self
        return Point(self.x, (P - self.y) % P)

    def __rmul__(self, k):
        k %= N
        acc = Point.infinity()
        # Most significant bit first.
        for bit in bin(k)[2:]:
            acc = acc + acc
            if bit == "1":
                acc = acc + self
        return acc

    __mul__ = __rmul__

    def sec(self, compressed=True) -> bytes:
        """SEC1 encoding: 33 bytes compressed or 65 bytes uncompressed."""
        if self.is_infinity:
            raise ValueError("Cannot encode the point at infinity")
        x = self.x.to_bytes(32, "big")
        if compressed:
            return bytes([2 + (self.y & 1)]) + x
        return b"\x04" + x + self.y.to_bytes(32, "big")

    @classmethod
    def parse(cls, data: bytes) -> "Point":
        """Decode a SEC1 compressed or uncompressed point."""
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidPublicKey(f"expected bytes, got {type(data).__name__}")
        data = bytes(data)
        if len(data) == 65 and data[0] == 0x04:
            try:
                return cls(int.from_bytes(data[1:33], "big"), int.from_bytes(data[33:], "big"))
            except ValueError as e:
                raise InvalidPublicKey(str(e)) from e
        if len(data) == 33 and data[0] in (0x02, 0x03):
            x = int.from_bytes(data[1:], "big")
            if x >= P:
                raise InvalidPublicKey("x coordinate out of field range")
            root = _curve_rhs(FieldElement(x)).sqrt()
            if root is None:
                raise InvalidPublicKey("x coordinate is not on the curve")
            y = root.value
            if (y & 1) != (data[0] & 1):
                y = P - y
            return cls(x, y)
        raise InvalidPublicKey(f"unsupported encoding of {len(data)} bytes")

    def __repr__(self):
        if self.is_infinity:
            return "Point(infinity)"
        return f"Point({self.x:#x}, {self.y:#x})"


G = Point(GX, GY)
