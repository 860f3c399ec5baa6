class KeyShareError(ValueError):
    """Base class for every recoverable error raised by threshold_keys."""


class InvalidThreshold(KeyShareError):
    def __init__(self, threshold, total_shares=None):
        self.threshold = threshold
        self.total_shares = total_shares
        if total_shares is None:
            self.message = f"Threshold must be at least 2, got {threshold}."
        else:
            self.message = (f"Threshold must be between 2 and the total number of shares "
                            f"({total_shares}), got {threshold}.")
        super().__init__(self.message)


class InvalidShareCount(KeyShareError):
    def __init__(self, total_shares):
        self.total_shares = total_shares
        self.message = f"Total shares must be an integer of at least 2, got {total_shares!r}."
        super().__init__(self.message)


class InsufficientShares(KeyShareError):
    def __init__(self, got, threshold):
        self.got = got
        self.threshold = threshold
        self.message = f"At least {threshold} shares are required to reconstruct, got {got}."
        super().__init__(self.message)


class DuplicateShare(KeyShareError):
    def __init__(self, x):
        self.x = x
        self.message = f"Duplicate share detected for x={x}, each must be unique."
        super().__init__(self.message)


class ShareSetMismatch(KeyShareError):
    def __init__(self, field, expected, actual):
        self.field = field
        self.expected = expected
        self.actual = actual
        self.message = (f"Shares do not belong to the same split: {field} "
                        f"expected {expected!r}, got {actual!r}.")
        super().__init__(self.message)


class MalformedBackupShare(KeyShareError):
    def __init__(self, share, reason):
        self.share = share
        self.reason = reason
        self.message = f"Invalid backup share {share!r}: {reason}."
        super().__init__(self.message)


class IntegrityMismatch(KeyShareError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        self.message = (f"Integrity hash mismatch: shares carry {expected}, "
                        f"recovered key hashes to {actual}.")
        super().__init__(self.message)


class InvalidPublicKey(KeyShareError):
    def __init__(self, reason):
        self.reason = reason
        self.message = f"Invalid public key: {reason}."
        super().__init__(self.message)


class InvalidPrivateKey(KeyShareError):
    def __init__(self, reason):
        self.reason = reason
        self.message = f"Invalid private key: {reason}."
        super().__init__(self.message)


class InvalidInvoiceNumber(KeyShareError):
    def __init__(self, invoice_number, reason="must be a UTF-8 encodable string"):
        self.invoice_number = invoice_number
        self.message = f"Invalid invoice number {invoice_number!r}: {reason}."
        super().__init__(self.message)


class MalformedSignature(KeyShareError):
    def __init__(self, reason):
        self.reason = reason
        self.message = f"Malformed DER signature: {reason}."
        super().__init__(self.message)
