"""Modular arithmetic over the two secp256k1 primes.

P is the prime of the curve's coordinate field. Key shares are also
computed mod P so that backups written by other implementations of the
same format interpolate to the same key. N is the order of the generator
and bounds private keys and scalar multiplication.
"""

P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class FieldElement:
    """Residue ``value`` mod ``modulus``.

    Operands may be other elements of the same field or plain ints, which
    are reduced first.
    """

    __slots__ = ("value", "modulus")

    def __init__(self, value, modulus=P):
        if not 0 <= value < modulus:
            raise ValueError(f"{value} is outside the field of size {modulus}")
        self.value = value
        self.modulus = modulus

    def _coerce(self, other):
        if isinstance(other, int):
            return other % self.modulus
        if other.modulus != self.modulus:
            raise TypeError(f"Cannot mix fields of size {self.modulus} and {other.modulus}")
        return other.value

    def _wrap(self, value):
        return FieldElement(value % self.modulus, self.modulus)

    def __eq__(self, other):
        if not isinstance(other, FieldElement):
            return NotImplemented
        return (self.value, self.modulus) == (other.value, other.modulus)

    def __hash__(self):
        return hash((self.value, self.modulus))

    def __add__(self, other):
        return self._wrap(self.value + self._coerce(other))

    __radd__ = __add__

    def __sub__(self, other):
        return self._wrap(self.value - self._coerce(other))

    def __rsub__(self, other):
        return self._wrap(self._coerce(other) - self.value)

    def __mul__(self, other):
        return self._wrap(self.value * self._coerce(other))

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, int):
            other = self._wrap(other)
        self._coerce(other)
        return self * other.inv()

    def __neg__(self):
        return self._wrap(-self.value)

    def __pow__(self, exponent):
        if exponent < 0:
            return self.inv() ** -exponent
        return FieldElement(pow(self.value, exponent, self.modulus), self.modulus)

    def inv(self):
        """Multiplicative inverse; the only inversion used in the package."""
        if self.value == 0:
            raise ZeroDivisionError(f"0 has no inverse mod {self.modulus}")
        return FieldElement(pow(self.value, -1, self.modulus), self.modulus)

    def sqrt(self):
        """A square root, or None. Requires modulus = 3 (mod 4), as P is."""
        root = self ** ((self.modulus + 1) // 4)
        if root * root != self:
            return None
        return root

    def __repr__(self):
        return f"FieldElement({self.value:#x}, modulus={self.modulus:#x})"


def element(value: int, modulus: int = P) -> FieldElement:
    """Reduce ``value`` into the field of size ``modulus``."""
    return FieldElement(value % modulus, modulus)
