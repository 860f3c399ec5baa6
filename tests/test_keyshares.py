"""Tests for key share sets and the backup text format."""

import dataclasses
import re

import pytest

from threshold_keys.errors import (
    DuplicateShare,
    InvalidShareCount,
    InvalidThreshold,
    MalformedBackupShare,
    ShareSetMismatch,
)
from threshold_keys.field import N, P
from threshold_keys.keyshares import KeyShares, integrity_tag, parse_backup_share, split
from threshold_keys.shamir import PointInFiniteField, int_to_base58, reconstruct

# Backup shares of one 3-of-5 split produced by another implementation.
SAME_SPLIT_BACKUP = [
    "45s4vLL2hFvqmxrarvbRT2vZoQYGZGocsmaEksZ64o5M.A7nZrGux15nEsQGNZ1mbfnMKugNnS6SYYEQwfhfbDZG8.3.2f804d43",
    "7aPzkiGZgvU4Jira5PN9Qf9o7FEg6uwy1zcxd17NBhh3.CCt7NH1sPFgceb6phTRkfviim2WvmUycJCQd2BxauxP9.3.2f804d43",
    "9GaS2Tw5sXqqbuigdjwGPwPsQuEFqzqUXo5MAQhdK3es.8MLh2wyE3huyq6hiBXjSkJRucgyKh4jVY6ESq5jNtXRE.3.2f804d43",
    "GBmoNRbsMVsLmEK5A6G28fktUNonZkn9mDrJJ58FXgsf.HDBRkzVUCtZ38ApEu36fvZtDoDSQTv3TWmbnxwwR7kto.3.2f804d43",
    "2gHebXBgPd7daZbsj6w9TPDta3vQzqvbkLtJG596rdN1.E7ZaHyyHNDCwR6qxZvKkPPWWXzFCiKQFentJtvSSH5Bi.3.2f804d43",
]


class TestSplit:

    def test_shape(self, rng):
        shares = split(rng.randrange(1, N), 2, 5, rng)
        assert len(shares.points) == 5
        assert shares.threshold == 2
        assert re.fullmatch(r"[0-9a-f]{8}", shares.integrity)

    def test_integrity_depends_on_secret_only(self, rng):
        a = split(1234567, 3, 5, rng)
        b = split(1234567, 2, 4, rng)
        assert a.integrity == b.integrity == integrity_tag(1234567)
        assert a.points != b.points

    def test_integrity_of_one(self):
        # hash160 of the compressed generator point
        assert integrity_tag(1) == "751e76e8"

    @pytest.mark.parametrize("threshold,total,error", [
        (100, 5, InvalidThreshold),
        (2, 1, InvalidShareCount),
        (1, 2, InvalidThreshold),
        (2, -4, InvalidShareCount),
        (3, 2, InvalidThreshold),
    ])
    def test_invalid_parameters(self, threshold, total, error):
        with pytest.raises(error):
            split(42, threshold, total)

    def test_immutable(self, rng):
        shares = split(42, 2, 3, rng)
        with pytest.raises(dataclasses.FrozenInstanceError):
            shares.threshold = 5


class TestBackupFormat:

    def test_round_trip(self, rng):
        secret = rng.randrange(1, N)
        shares = split(secret, 3, 5, rng)
        backup = shares.to_backup_format()
        assert len(backup) == 5
        restored = KeyShares.from_backup_format(backup)
        assert restored == shares
        assert reconstruct(restored.points, restored.threshold) == secret

    def test_subset_round_trip(self, rng):
        secret = rng.randrange(1, N)
        backup = split(secret, 3, 5, rng).to_backup_format()
        restored = KeyShares.from_backup_format([backup[4], backup[1], backup[2]])
        assert reconstruct(restored.points, 3) == secret

    def test_field_layout(self, rng):
        shares = split(42, 3, 4, rng)
        for point, line in zip(shares.points, shares.to_backup_format()):
            x, y, threshold, integrity = line.split(".")
            assert f"{x}.{y}" == str(point)
            assert threshold == "3"
            assert integrity == shares.integrity

    def test_parses_foreign_shares(self):
        shares = KeyShares.from_backup_format(SAME_SPLIT_BACKUP)
        assert len(shares.points) == 5
        assert shares.threshold == 3
        assert shares.integrity == "2f804d43"
        assert shares.to_backup_format() == SAME_SPLIT_BACKUP

    def test_recovers_foreign_shares(self):
        points = KeyShares.from_backup_format(SAME_SPLIT_BACKUP).points
        secret = reconstruct(points[:3], 3)
        assert reconstruct(points[2:], 3) == secret
        assert reconstruct([points[4], points[0], points[3]], 3) == secret
        assert 0 < secret < N
        assert integrity_tag(secret) == "2f804d43"

    def test_same_share_twice(self):
        backup = [SAME_SPLIT_BACKUP[0], SAME_SPLIT_BACKUP[1], SAME_SPLIT_BACKUP[1]]
        with pytest.raises(DuplicateShare):
            KeyShares.from_backup_format(backup)

    def test_threshold_mismatch(self):
        other = SAME_SPLIT_BACKUP[1].replace(".3.", ".4.")
        with pytest.raises(ShareSetMismatch) as e:
            KeyShares.from_backup_format([SAME_SPLIT_BACKUP[0], other])
        assert e.value.field == "threshold"
        assert e.value.expected == 3
        assert e.value.actual == 4

    def test_integrity_mismatch(self):
        other = SAME_SPLIT_BACKUP[1].replace("2f804d43", "00000000")
        with pytest.raises(ShareSetMismatch) as e:
            KeyShares.from_backup_format([SAME_SPLIT_BACKUP[0], other])
        assert e.value.field == "integrity"

    def test_empty(self):
        with pytest.raises(MalformedBackupShare):
            KeyShares.from_backup_format([])


class TestParseBackupShare:

    def test_valid(self):
        point, threshold, integrity = parse_backup_share("2.21.2.DEADBEEF")
        assert point == PointInFiniteField(1, 58)
        assert threshold == 2
        assert integrity == "deadbeef"

    def test_zero_y_encodes_empty(self):
        point, _, _ = parse_backup_share("2..2.deadbeef")
        assert point.y == 0

    @pytest.mark.parametrize("share", [
        "",
        "2.21.2",
        "2.21.2.deadbeef.extra",
        ".21.2.deadbeef",
        "0OIl.21.2.deadbeef",
        "2.21.x.deadbeef",
        "2.21.-3.deadbeef",
        "2.21.1.deadbeef",
        "2.21.2.deadbee",
        "2.21.2.deadbeefz",
        "2.21.2.ghijklmn",
        "1.21.2.deadbeef",
    ])
    def test_malformed(self, share):
        with pytest.raises(MalformedBackupShare):
            parse_backup_share(share)

    def test_coordinates_out_of_range(self):
        top = KeyShares([PointInFiniteField(P - 1, P - 1)], 2, "deadbeef").to_backup_format()[0]
        assert parse_backup_share(top)[0] == PointInFiniteField(P - 1, P - 1)
        with pytest.raises(MalformedBackupShare):
            parse_backup_share(f"{int_to_base58(P)}.2.2.deadbeef")
        with pytest.raises(MalformedBackupShare):
            parse_backup_share(f"2.{int_to_base58(P)}.2.deadbeef")

    def test_not_a_string(self):
        with pytest.raises(MalformedBackupShare):
            parse_backup_share(b"2.21.2.deadbeef")
