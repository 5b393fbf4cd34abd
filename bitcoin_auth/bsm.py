"""
Legacy Bitcoin Signed Message (BSM) signatures.

The message is hashed with the Bitcoin "magic" prefix and signed with a
recoverable ECDSA signature. Signatures travel as base64 of the 65-byte
compact form: a header byte (27 + recovery id, +4 for compressed keys)
followed by r and s.
"""

import base64
import binascii
import hashlib
import logging

from coincurve import PrivateKey, PublicKey

from .errors import SignatureFormatError

logger = logging.getLogger(__name__)

MAGIC_PREFIX = b"Bitcoin Signed Message:\n"

COMPACT_SIGNATURE_LENGTH = 65
HEADER_BASE = 27
HEADER_COMPRESSED = 4


def _varint(n: int) -> bytes:
    if n < 0xFD:
        return n.to_bytes(1, "little")
    if n <= 0xFFFF:
        return b"\xfd" + n.to_bytes(2, "little")
    if n <= 0xFFFFFFFF:
        return b"\xfe" + n.to_bytes(4, "little")
    return b"\xff" + n.to_bytes(8, "little")


def magic_hash(message: bytes) -> bytes:
    """Double SHA-256 of the length-prefixed magic prefix and message."""
    data = _varint(len(MAGIC_PREFIX)) + MAGIC_PREFIX + _varint(len(message)) + message
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def sign(message: bytes, private_key: PrivateKey) -> str:
    """
    Sign a message and return the base64 compact signature.

    Args:
        message: Raw message bytes.
        private_key: Signing key.

    Returns:
        Base64 string of the 65-byte compact recoverable signature.
    """
    recoverable = private_key.sign_recoverable(magic_hash(message), hasher=None)
    rs, recovery_id = recoverable[:64], recoverable[64]
    header = HEADER_BASE + recovery_id + HEADER_COMPRESSED
    return base64.b64encode(bytes([header]) + rs).decode("ascii")


def _decode_compact(signature: str) -> bytes:
    """Convert a base64 compact signature into coincurve's r || s || recid layout."""
    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise SignatureFormatError(f"BSM signature is not valid base64: {e}")

    if len(raw) != COMPACT_SIGNATURE_LENGTH:
        raise SignatureFormatError(
            f"BSM signature must be {COMPACT_SIGNATURE_LENGTH} bytes, got {len(raw)}"
        )

    header = raw[0]
    if not HEADER_BASE <= header < HEADER_BASE + 8:
        raise SignatureFormatError(f"Invalid BSM signature header byte: {header}")

    recovery_id = (header - HEADER_BASE) & 3
    return raw[1:] + bytes([recovery_id])


def recover_public_key(message: bytes, signature: str) -> PublicKey:
    """
    Recover the public key that produced a BSM signature.

    Raises:
        SignatureFormatError: If the signature is not a compact BSM signature.
        ValueError: If no public key can be recovered.
    """
    recoverable = _decode_compact(signature)
    return PublicKey.from_signature_and_message(recoverable, magic_hash(message), hasher=None)


def verify(message: bytes, signature: str, public_key: PublicKey) -> bool:
    """
    Verify a BSM signature against an expected public key.

    Returns:
        True if the signature recovers to ``public_key``.

    Raises:
        SignatureFormatError: If the signature is not a compact BSM signature.
    """
    recoverable = _decode_compact(signature)
    try:
        recovered = PublicKey.from_signature_and_message(
            recoverable, magic_hash(message), hasher=None
        )
    except ValueError as e:
        logger.debug(f"BSM public key recovery failed: {e}")
        return False
    return recovered.format(compressed=True) == public_key.format(compressed=True)
