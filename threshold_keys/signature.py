"""ECDSA over secp256k1: deterministic (RFC 6979) low-S signatures in DER."""

import hashlib

from ecdsa import SECP256k1, BadSignatureError, SigningKey, VerifyingKey
from ecdsa.der import UnexpectedDER
from ecdsa.util import sigdecode_der, sigencode_der, sigencode_strings_canonize

from threshold_keys.crypto import sha256
from threshold_keys.ecc import Point
from threshold_keys.errors import MalformedSignature
from threshold_keys.field import N


class Signature:
    def __init__(self, r: int, s: int):
        self.r = r
        self.s = s

    @classmethod
    def sign(cls, message: bytes, d: int) -> "Signature":
        """Sign SHA-256(message) with scalar ``d``.

        The nonce follows RFC 6979 and s is folded into the lower half of
        the group order, as Bitcoin relay policy requires.
        """
        key = SigningKey.from_secret_exponent(d, curve=SECP256k1, hashfunc=hashlib.sha256)
        r, s = key.sign_digest_deterministic(sha256(message), hashfunc=hashlib.sha256,
                                             sigencode=sigencode_strings_canonize)
        return cls(int.from_bytes(r, "big"), int.from_bytes(s, "big"))

    def verify(self, message: bytes, public_key) -> bool:
        """True if this signs SHA-256(message) under ``public_key``.

        High-S signatures are accepted. ``public_key`` is a PublicKey or a Point.
        """
        point = public_key.point if hasattr(public_key, "point") else public_key
        if not isinstance(point, Point) or point.is_infinity:
            return False
        if not (1 <= self.r < N and 1 <= self.s < N):
            return False
        key = VerifyingKey.from_string(point.sec(), curve=SECP256k1, hashfunc=hashlib.sha256)
        try:
            return key.verify_digest(self.to_der(), sha256(message), sigdecode=sigdecode_der)
        except BadSignatureError:
            return False

    def to_der(self) -> bytes:
        return sigencode_der(self.r, self.s, N)

    @classmethod
    def from_der(cls, data: bytes) -> "Signature":
        if not data:
            raise MalformedSignature("empty input")
        try:
            r, s = sigdecode_der(bytes(data), N)
        except UnexpectedDER as e:
            raise MalformedSignature(str(e)) from e
        return cls(r, s)

    def __eq__(self, other):
        if not isinstance(other, Signature):
            return NotImplemented
        return self.r == other.r and self.s == other.s

    def __hash__(self):
        return hash((self.r, self.s))

    def __repr__(self):
        return f"Signature(r={self.r:x}, s={self.s:x})"
