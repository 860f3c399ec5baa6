"""BRC-42 invoice based child key derivation.

Both parties compute the same ECDH shared point S. The offset is
HMAC-SHA256 keyed with the compressed encoding of S over the UTF-8
invoice number. The recipient adds the offset to its private scalar and
the sender adds offset*G to the recipient's public point, so each invoice
yields a fresh key pair without any further exchange.
"""

import logging

from threshold_keys.crypto import hmac_sha256
from threshold_keys.ecc import G, Point
from threshold_keys.errors import InvalidInvoiceNumber, InvalidPublicKey
from threshold_keys.field import N

logger = logging.getLogger(__name__)


def encode_invoice_number(invoice_number) -> bytes:
    if not isinstance(invoice_number, str):
        raise InvalidInvoiceNumber(invoice_number, "must be a string")
    try:
        return invoice_number.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidInvoiceNumber(invoice_number) from e


def shared_secret(private_scalar: int, public_point: Point) -> Point:
    if not isinstance(public_point, Point) or public_point.is_infinity:
        raise InvalidPublicKey("counterparty key is not a curve point")
    return private_scalar * public_point


def invoice_offset(shared_point: Point, invoice: bytes) -> int:
    """HMAC-SHA256(key=sec(S), msg=invoice) as a big-endian integer."""
    return int.from_bytes(hmac_sha256(shared_point.sec(compressed=True), invoice), "big")


def derive_child_scalar(private_scalar: int, counterparty_point: Point, invoice_number: str) -> int:
    """Recipient side: (d + offset) mod N."""
    invoice = encode_invoice_number(invoice_number)
    offset = invoice_offset(shared_secret(private_scalar, counterparty_point), invoice)
    logger.debug("Derived child private key for invoice %r", invoice_number)
    return (private_scalar + offset) % N


def derive_child_point(public_point: Point, counterparty_scalar: int, invoice_number: str) -> Point:
    """Sender side: public_point + offset*G, where the sender holds ``counterparty_scalar``."""
    invoice = encode_invoice_number(invoice_number)
    offset = invoice_offset(shared_secret(counterparty_scalar, public_point), invoice)
    logger.debug("Derived child public key for invoice %r", invoice_number)
    return public_point + offset * G
