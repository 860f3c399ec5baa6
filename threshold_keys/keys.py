"""secp256k1 private and public keys.

PrivateKey is the entry point for splitting a key into backup shares,
recovering it from them, signing, and BRC-42 child key derivation.
"""

import logging
from typing import List, Sequence

import base58
from Crypto.Random import random as secure_random

from threshold_keys import derivation
from threshold_keys.crypto import hash160
from threshold_keys.ecc import G, Point
from threshold_keys.errors import IntegrityMismatch, InvalidPrivateKey, InvalidPublicKey
from threshold_keys.field import N
from threshold_keys.keyshares import KeyShares, integrity_tag, split
from threshold_keys.shamir import Polynomial, reconstruct
from threshold_keys.signature import Signature

logger = logging.getLogger(__name__)

WIF_MAINNET = b"\x80"
WIF_TESTNET = b"\xef"


class PublicKey:
    def __init__(self, point: Point):
        if not isinstance(point, Point) or point.is_infinity:
            raise InvalidPublicKey("not a finite curve point")
        self.point = point

    @classmethod
    def from_bytes(cls, data: bytes) -> "PublicKey":
        return cls(Point.parse(data))

    @classmethod
    def from_hex(cls, text: str) -> "PublicKey":
        try:
            data = bytes.fromhex(text)
        except (TypeError, ValueError) as e:
            raise InvalidPublicKey("not a hex string") from e
        return cls.from_bytes(data)

    def serialize(self, compressed=True) -> bytes:
        return self.point.sec(compressed=compressed)

    def serialize_uncompressed(self) -> bytes:
        return self.point.sec(compressed=False)

    def hex(self, compressed=True) -> str:
        return self.serialize(compressed).hex()

    def hash160(self) -> bytes:
        return hash160(self.serialize())

    def verify(self, message: bytes, signature: Signature) -> bool:
        return signature.verify(message, self)

    def derive_shared_secret(self, private_key: "PrivateKey") -> "PublicKey":
        return PublicKey(derivation.shared_secret(private_key.d, self.point))

    def derive_child(self, private_key: "PrivateKey", invoice_number: str) -> "PublicKey":
        """Child public key of this (recipient) key, derived by the sender.

        ``private_key`` is the sender's own key; the recipient computes the
        matching private key with ``PrivateKey.derive_child`` given the
        sender's public key and the same invoice number.
        """
        return PublicKey(derivation.derive_child_point(self.point, private_key.d, invoice_number))

    def __eq__(self, other):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.point == other.point

    def __hash__(self):
        return hash(self.serialize())

    def __repr__(self):
        return f"PublicKey({self.hex()})"


class PrivateKey:
    def __init__(self, d: int):
        if not isinstance(d, int) or not 0 < d < N:
            raise InvalidPrivateKey("scalar must be in the range [1, N-1]")
        self.d = d
        self._public_key = None

    @classmethod
    def generate(cls, rng=None) -> "PrivateKey":
        if rng is None:
            rng = secure_random
        return cls(rng.randrange(1, N))

    @classmethod
    def from_bytes(cls, data: bytes) -> "PrivateKey":
        if not isinstance(data, (bytes, bytearray)) or len(data) != 32:
            raise InvalidPrivateKey("expected 32 bytes")
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_hex(cls, text: str) -> "PrivateKey":
        try:
            data = bytes.fromhex(text)
        except (TypeError, ValueError) as e:
            raise InvalidPrivateKey("not a hex string") from e
        return cls.from_bytes(data)

    @classmethod
    def from_wif(cls, wif: str) -> "PrivateKey":
        try:
            payload = base58.b58decode_check(wif)
        except ValueError as e:
            raise InvalidPrivateKey(f"bad WIF checksum or encoding ({e})") from e
        if payload[:1] not in (WIF_MAINNET, WIF_TESTNET):
            raise InvalidPrivateKey("unknown WIF network prefix")
        body = payload[1:]
        if len(body) == 33 and body[32] == 0x01:
            body = body[:32]
        return cls.from_bytes(body)

    def serialize(self) -> bytes:
        return self.d.to_bytes(32, "big")

    def hex(self) -> str:
        return self.serialize().hex()

    def wif(self, compressed=True, mainnet=True) -> str:
        prefix = WIF_MAINNET if mainnet else WIF_TESTNET
        payload = prefix + self.serialize() + (b"\x01" if compressed else b"")
        return base58.b58encode_check(payload).decode("ascii")

    @property
    def public_key(self) -> PublicKey:
        if self._public_key is None:
            self._public_key = PublicKey(self.d * G)
        return self._public_key

    def sign(self, message: bytes) -> Signature:
        return Signature.sign(message, self.d)

    def derive_shared_secret(self, public_key: PublicKey) -> PublicKey:
        return PublicKey(derivation.shared_secret(self.d, _point_of(public_key)))

    def derive_child(self, public_key: PublicKey, invoice_number: str) -> "PrivateKey":
        """Child private key for ``invoice_number`` agreed with the owner of ``public_key``."""
        return PrivateKey(derivation.derive_child_scalar(self.d, _point_of(public_key), invoice_number))

    def to_polynomial(self, threshold: int, rng=None) -> Polynomial:
        return Polynomial.from_secret(self.d, threshold, rng)

    def to_key_shares(self, threshold: int, total_shares: int, rng=None) -> KeyShares:
        return split(self.d, threshold, total_shares, rng)

    def to_backup_shares(self, threshold: int, total_shares: int, rng=None) -> List[str]:
        return self.to_key_shares(threshold, total_shares, rng).to_backup_format()

    @classmethod
    def from_key_shares(cls, key_shares: KeyShares) -> "PrivateKey":
        """Recover a key and check it against the shares' integrity tag.

        Raises:
            InvalidThreshold, InsufficientShares, DuplicateShare: see ``reconstruct``.
            IntegrityMismatch: the recovered key is not the one that was split,
                meaning a share was altered or taken from another split.
        """
        secret = reconstruct(key_shares.points, key_shares.threshold)
        # Interpolation runs mod P, so the result may fall outside [1, N).
        actual = integrity_tag(secret) if 0 < secret < N else None
        if actual != key_shares.integrity:
            raise IntegrityMismatch(key_shares.integrity, actual)
        logger.debug("Recovered private key from %d shares", len(key_shares.points))
        return cls(secret)

    @classmethod
    def from_backup_shares(cls, shares: Sequence[str]) -> "PrivateKey":
        return cls.from_key_shares(KeyShares.from_backup_format(shares))

    def __eq__(self, other):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.d == other.d

    def __hash__(self):
        return hash(self.d)

    def __repr__(self):
        return f"PrivateKey(pub={self.public_key.hex()})"


def _point_of(public_key) -> Point:
    if not isinstance(public_key, PublicKey):
        raise InvalidPublicKey(f"expected PublicKey, got {type(public_key).__name__}")
    return public_key.point
