"""Shamir secret sharing over the secp256k1 coordinate field F_p.

Polynomials are never held as coefficients. A degree-(t-1) polynomial is
kept as t sample points and every evaluation goes through Lagrange
interpolation, so the same code both generates shares (x >= 1) and
recovers the secret (x = 0).
"""

import logging
from dataclasses import dataclass

import base58
from Crypto.Random import random as secure_random

from threshold_keys.errors import DuplicateShare, InsufficientShares, InvalidShareCount, InvalidThreshold
from threshold_keys.field import P, element

logger = logging.getLogger(__name__)


def int_to_base58(value: int) -> str:
    """Base58 of the minimal big-endian encoding of ``value``."""
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return base58.b58encode(raw).decode("ascii")


def base58_to_int(text: str) -> int:
    return int.from_bytes(base58.b58decode(text), "big")


@dataclass(frozen=True)
class PointInFiniteField:
    x: int
    y: int

    def __post_init__(self):
        object.__setattr__(self, "x", self.x % P)
        object.__setattr__(self, "y", self.y % P)

    def __str__(self):
        return f"{int_to_base58(self.x)}.{int_to_base58(self.y)}"

    @classmethod
    def from_string(cls, text: str) -> "PointInFiniteField":
        parts = text.split(".")
        if len(parts) != 2:
            raise ValueError(f"Expected 'x.y', got {text!r}")
        return cls(base58_to_int(parts[0]), base58_to_int(parts[1]))


def check_distinct(points) -> None:
    """Raise DuplicateShare if two points share an x-coordinate."""
    seen = set()
    for point in points:
        if point.x in seen:
            raise DuplicateShare(point.x)
        seen.add(point.x)


def lagrange_interpolate(points, x: int) -> int:
    """Value at ``x`` of the unique polynomial through ``points``, mod P.

    L(x) = sum_i y_i * prod_{j!=i} (x - x_j)/(x_i - x_j)
    """
    check_distinct(points)
    target = element(x)
    total = element(0)
    for i, pi in enumerate(points):
        xi = element(pi.x)
        num = element(1)
        den = element(1)
        for j, pj in enumerate(points):
            if i == j:
                continue
            xj = element(pj.x)
            num = num * (target - xj)
            den = den * (xi - xj)
        total = total + pi.y * num / den
    return total.value


class Polynomial:
    """Degree-(threshold-1) polynomial represented by ``threshold`` points."""

    def __init__(self, points, threshold=None):
        points = list(points)
        if threshold is None:
            threshold = len(points)
        if threshold < 2:
            raise InvalidThreshold(threshold)
        if len(points) < threshold:
            raise InsufficientShares(len(points), threshold)
        self.points = points[:threshold]
        self.threshold = threshold

    @classmethod
    def from_secret(cls, secret: int, threshold: int, rng=None) -> "Polynomial":
        """Random polynomial with ``secret`` as its value at 0.

        Args:
            secret: Scalar to hide in the constant term.
            threshold: Number of points needed to pin the polynomial down.
            rng: Object with ``randrange``; defaults to a CSPRNG. Pass a
                seeded ``random.Random`` for reproducible tests.
        """
        if not isinstance(threshold, int) or threshold < 2:
            raise InvalidThreshold(threshold)
        if rng is None:
            rng = secure_random
        points = [PointInFiniteField(0, secret)]
        for i in range(1, threshold):
            points.append(PointInFiniteField(i, rng.randrange(P)))
        return cls(points, threshold)

    def value_at(self, x: int) -> int:
        return lagrange_interpolate(self.points, x)

    def __repr__(self):
        return f"Polynomial(threshold={self.threshold})"


def validate_split(threshold, total_shares) -> None:
    if not isinstance(total_shares, int) or total_shares < 2:
        raise InvalidShareCount(total_shares)
    if not isinstance(threshold, int) or threshold < 2:
        raise InvalidThreshold(threshold, total_shares)
    if threshold > total_shares:
        raise InvalidThreshold(threshold, total_shares)


def generate_shares(secret: int, threshold: int, total_shares: int, rng=None) -> list:
    """Evaluate a fresh secret polynomial at x = 1..total_shares."""
    validate_split(threshold, total_shares)
    poly = Polynomial.from_secret(secret, threshold, rng)
    shares = [PointInFiniteField(x, poly.value_at(x)) for x in range(1, total_shares + 1)]
    logger.debug("Generated %d shares with threshold %d", total_shares, threshold)
    return shares


def reconstruct(points, threshold: int) -> int:
    """Recover the secret (value at x=0) from at least ``threshold`` shares.

    Only the first ``threshold`` points are interpolated. With genuine
    shares the result is always the original secret. Forged shares, or
    shares from a polynomial of higher degree than ``threshold - 1``,
    yield an unrelated value without any error: t-1 shares carry no
    information about the secret, so nothing here can detect it.
    """
    points = list(points)
    if not isinstance(threshold, int) or threshold < 2:
        raise InvalidThreshold(threshold)
    if len(points) < threshold:
        raise InsufficientShares(len(points), threshold)
    check_distinct(points)
    logger.debug("Reconstructing secret from %d of %d shares", threshold, len(points))
    return Polynomial(points, threshold).value_at(0)
