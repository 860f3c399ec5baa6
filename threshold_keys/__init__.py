"""Threshold backup shares and BRC-42 child keys for secp256k1 private keys."""

from threshold_keys.errors import (
    DuplicateShare,
    InsufficientShares,
    IntegrityMismatch,
    InvalidInvoiceNumber,
    InvalidPrivateKey,
    InvalidPublicKey,
    InvalidShareCount,
    InvalidThreshold,
    KeyShareError,
    MalformedBackupShare,
    MalformedSignature,
    ShareSetMismatch,
)
from threshold_keys.keys import PrivateKey, PublicKey
from threshold_keys.keyshares import KeyShares, split
from threshold_keys.shamir import PointInFiniteField, Polynomial, reconstruct
from threshold_keys.signature import Signature

__version__ = "0.1.0"
