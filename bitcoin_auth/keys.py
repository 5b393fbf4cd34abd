"""
Key loading helpers for secp256k1 keys.

Private keys are accepted as WIF strings, 64-character hex strings or
``coincurve.PrivateKey`` objects. Public keys travel as hex encoded
compressed points (33 bytes, 66 hex characters).
"""

import logging
import string
from typing import Union

import base58
from coincurve import PrivateKey, PublicKey

from .errors import InvalidKeyError

logger = logging.getLogger(__name__)

# WIF version bytes (mainnet, testnet) and the compressed-pubkey suffix
WIF_PREFIXES = (b"\x80", b"\xef")
WIF_COMPRESSED_SUFFIX = b"\x01"

PrivateKeyLike = Union[str, PrivateKey]


def _is_hex(value: str) -> bool:
    return all(c in string.hexdigits for c in value)


def load_private_key(value: PrivateKeyLike) -> PrivateKey:
    """
    Load a private key from WIF, hex, or an existing key object.

    Args:
        value: WIF string, 64-char hex secret, or ``coincurve.PrivateKey``.

    Returns:
        The loaded ``coincurve.PrivateKey``.

    Raises:
        InvalidKeyError: If the value is not a usable private key.
    """
    if isinstance(value, PrivateKey):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidKeyError("Private key must be a WIF or hex string")

    if len(value) == 64 and _is_hex(value):
        secret = bytes.fromhex(value)
    else:
        secret = _decode_wif(value)

    try:
        return PrivateKey(secret)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid private key: {e}")


def _decode_wif(wif: str) -> bytes:
    try:
        raw = base58.b58decode_check(wif)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid WIF private key: {e}")

    prefix, payload = raw[:1], raw[1:]
    if prefix not in WIF_PREFIXES:
        raise InvalidKeyError(f"Unknown WIF version byte: {prefix.hex()}")

    if len(payload) == 33 and payload[32:] == WIF_COMPRESSED_SUFFIX:
        return payload[:32]
    if len(payload) == 32:
        return payload
    raise InvalidKeyError(f"Invalid WIF payload length: {len(payload)}")


def private_key_to_wif(private_key: PrivateKey, compressed: bool = True, testnet: bool = False) -> str:
    """Encode a private key as WIF."""
    prefix = WIF_PREFIXES[1] if testnet else WIF_PREFIXES[0]
    payload = prefix + private_key.secret
    if compressed:
        payload += WIF_COMPRESSED_SUFFIX
    return base58.b58encode_check(payload).decode("ascii")


def public_key_hex(key: Union[PrivateKey, PublicKey]) -> str:
    """Return the hex encoded compressed public key for a private or public key."""
    if isinstance(key, PrivateKey):
        key = key.public_key
    return key.format(compressed=True).hex()


def parse_public_key(value: str) -> PublicKey:
    """
    Parse a hex encoded public key.

    Raises:
        InvalidKeyError: If the value is not hex or not a point on the curve.
    """
    if not isinstance(value, str) or not value:
        raise InvalidKeyError("Public key must be a non-empty hex string")
    try:
        return PublicKey(bytes.fromhex(value))
    except ValueError as e:
        logger.debug(f"Rejected public key {value[:16]}...: {e}")
        raise InvalidKeyError(f"Invalid public key: {e}")
