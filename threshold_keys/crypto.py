from Crypto.Hash import HMAC, RIPEMD160, SHA256


def sha256(data: bytes) -> bytes:
    return SHA256.new(data=data).digest()


def ripemd160(data: bytes) -> bytes:
    return RIPEMD160.new(data=data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data)), the Bitcoin public key hash."""
    return ripemd160(sha256(data))


def hmac_sha256(key: bytes, message: bytes) -> bytes:
    return HMAC.new(key, msg=message, digestmod=SHA256).digest()
