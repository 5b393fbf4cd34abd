"""
bitcoin-auth Command Line Interface.

Provides commands for issuing, inspecting and verifying auth tokens, and for
encrypting payloads between key holders.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from . import config
from .canonical import format_timestamp
from .encryption import decrypt, encrypt
from .errors import BitcoinAuthError
from .models import AuthPayload, BodyEncoding, Scheme
from .signer import Signer
from .tokens import parse_auth_token
from .verifier import check_auth_token


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def _private_key(args: argparse.Namespace):
    key = args.key or config.get_private_key()
    if not key:
        print(f"Error: Missing private key. Set {config.PRIVATE_KEY_ENV} or use --key", file=sys.stderr)
    return key


def cmd_sign(args: argparse.Namespace) -> int:
    """Issue a token for a request path."""
    private_key = _private_key(args)
    if not private_key:
        return 1

    try:
        signer = Signer(private_key=private_key)
        token = signer.sign(
            args.path,
            body=args.body,
            scheme=args.scheme,
            body_encoding=args.encoding,
            timestamp=args.timestamp,
        )
    except BitcoinAuthError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.header:
        for name, value in config.auth_headers(token).items():
            print(f"{name}: {value}")
    else:
        print(token)
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Verify a token against a request."""
    target = AuthPayload(
        request_path=args.path,
        timestamp=args.timestamp or format_timestamp(),
        body=args.body,
    )
    valid, parsed = check_auth_token(
        args.token,
        target,
        time_pad=args.time_pad,
        body_encoding=args.encoding,
        max_age=args.max_age,
    )

    if args.json:
        result = {"valid": valid}
        if parsed:
            result.update(asdict(parsed))
            result["scheme"] = parsed.scheme.value
        print(json.dumps(result, indent=2))
    elif valid:
        print("✅ VALID")
        print(f"   Public key: {parsed.pubkey}")
        print(f"   Scheme:     {parsed.scheme.value}")
        print(f"   Timestamp:  {parsed.timestamp}")
    else:
        print("❌ INVALID")
    return 0 if valid else 1


def cmd_parse(args: argparse.Namespace) -> int:
    """Show the fields of a token without verifying it."""
    parsed = parse_auth_token(args.token)
    if parsed is None:
        print("Error: Malformed token", file=sys.stderr)
        return 1

    fields = asdict(parsed)
    fields["scheme"] = parsed.scheme.value
    if args.json:
        print(json.dumps(fields, indent=2))
    else:
        for name, value in fields.items():
            print(f"{name:>13}: {value}")
    return 0


def cmd_encrypt(args: argparse.Namespace) -> int:
    """Encrypt a message for a recipient public key."""
    private_key = _private_key(args)
    if not private_key:
        return 1
    try:
        print(encrypt(private_key, args.recipient, args.message))
    except BitcoinAuthError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_decrypt(args: argparse.Namespace) -> int:
    """Decrypt a message from a sender public key."""
    private_key = _private_key(args)
    if not private_key:
        return 1
    try:
        print(decrypt(private_key, args.sender, args.ciphertext))
    except BitcoinAuthError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='bitcoin-auth',
        description='Sign and verify REST API auth tokens with Bitcoin keys'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    schemes = [s.value for s in Scheme]
    encodings = [e.value for e in BodyEncoding]

    # sign command
    p_sign = subparsers.add_parser('sign', help='Issue a token for a request')
    p_sign.add_argument('path', help='Request path including query string')
    p_sign.add_argument('--body', help='Request body')
    p_sign.add_argument('--encoding', choices=encodings, help='Body encoding (default: utf8)')
    p_sign.add_argument('--scheme', choices=schemes, help='Signature scheme (default: brc77)')
    p_sign.add_argument('--timestamp', help='ISO-8601 timestamp to sign (default: now)')
    p_sign.add_argument('--key', help='Private key (WIF)')
    p_sign.add_argument('--header', action='store_true', help='Output with auth header prefix')

    # verify command
    p_verify = subparsers.add_parser('verify', help='Verify a token')
    p_verify.add_argument('token', help='The token to verify')
    p_verify.add_argument('--path', required=True, help='Request path the server received')
    p_verify.add_argument('--body', help='Request body the server received')
    p_verify.add_argument('--encoding', choices=encodings, help='Body encoding (default: utf8)')
    p_verify.add_argument('--timestamp', help='Reference time (default: now)')
    p_verify.add_argument('--time-pad', type=int, default=config.TIME_PAD_MINUTES,
                          help='Allowed forward skew in minutes')
    p_verify.add_argument('--max-age', type=int, help='Reject tokens older than this many minutes')
    p_verify.add_argument('--json', action='store_true', help='Output as JSON')

    # parse command
    p_parse = subparsers.add_parser('parse', help='Show token fields without verifying')
    p_parse.add_argument('token', help='The token to parse')
    p_parse.add_argument('--json', action='store_true', help='Output as JSON')

    # encrypt / decrypt commands
    p_encrypt = subparsers.add_parser('encrypt', help='Encrypt a message for a recipient')
    p_encrypt.add_argument('recipient', help='Recipient public key (hex)')
    p_encrypt.add_argument('message', help='The message to encrypt')
    p_encrypt.add_argument('--key', help='Sender private key (WIF)')

    p_decrypt = subparsers.add_parser('decrypt', help='Decrypt a message from a sender')
    p_decrypt.add_argument('sender', help='Sender public key (hex)')
    p_decrypt.add_argument('ciphertext', help='Hex ciphertext')
    p_decrypt.add_argument('--key', help='Recipient private key (WIF)')

    return parser


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    commands = {
        'sign': cmd_sign,
        'verify': cmd_verify,
        'parse': cmd_parse,
        'encrypt': cmd_encrypt,
        'decrypt': cmd_decrypt,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 0
    return handler(args)


if __name__ == '__main__':
    sys.exit(main())
