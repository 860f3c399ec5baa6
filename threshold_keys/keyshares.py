"""Key share sets and their portable backup text format.

A backup share is ``B58(x).B58(y).threshold.integrity``: two base58
big-endian integers, the decimal threshold, and an 8 hex digit tag
shared by every share of one split.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from threshold_keys.crypto import hash160
from threshold_keys.ecc import G
from threshold_keys.errors import DuplicateShare, MalformedBackupShare, ShareSetMismatch
from threshold_keys.field import P
from threshold_keys.shamir import PointInFiniteField, base58_to_int, generate_shares

logger = logging.getLogger(__name__)

_THRESHOLD_RE = re.compile(r"[0-9]+")
_INTEGRITY_RE = re.compile(r"[0-9a-fA-F]{8}")


def integrity_tag(secret: int) -> str:
    """First 8 hex digits of hash160 of the compressed public key of ``secret``."""
    return hash160((secret * G).sec(compressed=True)).hex()[:8]


@dataclass(frozen=True)
class KeyShares:
    points: Tuple[PointInFiniteField, ...]
    threshold: int
    integrity: str

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(self.points))

    def to_backup_format(self) -> List[str]:
        return [f"{point}.{self.threshold}.{self.integrity}" for point in self.points]

    @classmethod
    def from_backup_format(cls, shares: Sequence[str]) -> "KeyShares":
        """Parse backup strings that must all come from the same split.

        Raises:
            MalformedBackupShare: a string does not decode, or none were given.
            DuplicateShare: two strings carry the same x-coordinate.
            ShareSetMismatch: threshold or integrity differ between strings.
        """
        shares = list(shares)
        if not shares:
            raise MalformedBackupShare(shares, "no backup shares supplied")

        points = []
        seen = set()
        threshold = integrity = None
        for share in shares:
            point, share_threshold, share_integrity = parse_backup_share(share)
            if threshold is None:
                threshold, integrity = share_threshold, share_integrity
            elif share_threshold != threshold:
                raise ShareSetMismatch("threshold", threshold, share_threshold)
            elif share_integrity != integrity:
                raise ShareSetMismatch("integrity", integrity, share_integrity)
            if point.x in seen:
                raise DuplicateShare(point.x)
            seen.add(point.x)
            points.append(point)

        logger.debug("Parsed %d backup shares (threshold %d, integrity %s)",
                     len(points), threshold, integrity)
        return cls(points, threshold, integrity)


def parse_backup_share(share: str) -> Tuple[PointInFiniteField, int, str]:
    if not isinstance(share, str):
        raise MalformedBackupShare(share, "expected a string")
    parts = share.split(".")
    if len(parts) != 4:
        raise MalformedBackupShare(share, f"expected 4 dot-separated fields, got {len(parts)}")
    x_text, y_text, threshold_text, integrity = parts

    if not x_text:
        raise MalformedBackupShare(share, "empty x-coordinate")
    try:
        x = base58_to_int(x_text)
        y = base58_to_int(y_text)
    except ValueError as e:
        raise MalformedBackupShare(share, f"coordinate is not base58 ({e})") from e
    if x == 0 or x >= P:
        raise MalformedBackupShare(share, "x-coordinate out of range")
    if y >= P:
        raise MalformedBackupShare(share, "y-coordinate out of range")

    if not _THRESHOLD_RE.fullmatch(threshold_text):
        raise MalformedBackupShare(share, "threshold is not a decimal integer")
    threshold = int(threshold_text)
    if threshold < 2:
        raise MalformedBackupShare(share, "threshold must be at least 2")

    if not _INTEGRITY_RE.fullmatch(integrity):
        raise MalformedBackupShare(share, "integrity must be 8 hex digits")

    return PointInFiniteField(x, y), threshold, integrity.lower()


def split(secret: int, threshold: int, total_shares: int, rng=None) -> KeyShares:
    """Split ``secret`` into ``total_shares`` shares, any ``threshold`` of which recover it."""
    points = generate_shares(secret, threshold, total_shares, rng)
    integrity = integrity_tag(secret)
    logger.debug("Split secret into %d shares, integrity %s", total_shares, integrity)
    return KeyShares(points, threshold, integrity)
