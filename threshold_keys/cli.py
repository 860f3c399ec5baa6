import argparse
import logging
import sys

from threshold_keys.errors import KeyShareError
from threshold_keys.keys import PrivateKey, PublicKey

logger = logging.getLogger(__name__)


def _load_key(args) -> PrivateKey:
    if args.key:
        return PrivateKey.from_hex(args.key)
    if args.wif:
        return PrivateKey.from_wif(args.wif)
    key = PrivateKey.generate()
    print(f"Generated private key: {key.hex()}")
    return key


def cmd_split(args, parser):
    if args.threshold < 2:
        parser.error("Threshold must be at least 2.")
    if args.threshold > args.num_shares:
        parser.error("Threshold cannot be greater than the number of shares.")

    key = _load_key(args)
    print(f"Public key: {key.public_key.hex()}")
    for i, share in enumerate(key.to_backup_shares(args.threshold, args.num_shares), 1):
        print(f"Share {i}: {share}")


def cmd_recover(args, parser):
    key = PrivateKey.from_backup_shares(args.shares)
    print(f"Private key: {key.hex()}")
    print(f"Public key: {key.public_key.hex()}")


def cmd_derive(args, parser):
    key = _load_key(args)
    counterparty = PublicKey.from_hex(args.counterparty)
    if args.public:
        child = counterparty.derive_child(key, args.invoice)
        print(f"Child public key: {child.hex()}")
    else:
        child = key.derive_child(counterparty, args.invoice)
        print(f"Child private key: {child.hex()}")
        print(f"Child public key: {child.public_key.hex()}")


def cmd_sign(args, parser):
    key = _load_key(args)
    message = args.message.encode("utf-8")
    sig = key.sign(message)
    print(f"Message: {args.message}")
    print(f"Signature: {sig.to_der().hex()}")
    print(f"Signature valid? {key.public_key.verify(message, sig)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="threshold-keys",
                                     description="secp256k1 key backup shares and BRC-42 derivation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_key_options(p):
        group = p.add_mutually_exclusive_group()
        group.add_argument("--key", help="Private key as 64 hex digits")
        group.add_argument("--wif", help="Private key in WIF")

    p = sub.add_parser("split", help="Split a private key into backup shares")
    add_key_options(p)
    p.add_argument("-n", "--num-shares", type=int, default=5, help="Number of shares to generate (default: 5)")
    p.add_argument("-t", "--threshold", type=int, default=3,
                   help="Shares needed to recover the key, must be <= num-shares (default: 3)")
    p.set_defaults(func=cmd_split)

    p = sub.add_parser("recover", help="Recover a private key from backup shares")
    p.add_argument("shares", nargs="+", help="Backup shares in x.y.threshold.integrity form")
    p.set_defaults(func=cmd_recover)

    p = sub.add_parser("derive", help="Derive a BRC-42 child key for an invoice number")
    add_key_options(p)
    p.add_argument("--counterparty", required=True, help="Counterparty public key as hex")
    p.add_argument("--invoice", required=True, help="Invoice number")
    p.add_argument("--public", action="store_true",
                   help="Derive the counterparty's child public key (sender side)")
    p.set_defaults(func=cmd_derive)

    p = sub.add_parser("sign", help="Sign a message and verify the signature")
    add_key_options(p)
    p.add_argument("message", help="Message to sign")
    p.set_defaults(func=cmd_sign)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args, parser)
    except KeyShareError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
