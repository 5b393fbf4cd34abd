"""
BRC-77 signed messages.

A signed message binds a signer's identity key to a message using a child key
derived with BRC-42 (ECDH shared secret + HMAC-SHA256 over an invoice
number). Messages can be addressed to a specific verifier or to "anyone".

Wire layout::

    version (4) | signer pubkey (33) | verifier pubkey (33) or 0x00 | key id (32) | DER signature
"""

import base64
import hashlib
import hmac
import logging
import secrets
from typing import Optional

from coincurve import PrivateKey, PublicKey

from .errors import SignatureFormatError

logger = logging.getLogger(__name__)

VERSION = bytes.fromhex("42423301")
PROTOCOL = "2-message signing-"

KEY_ID_LENGTH = 32
PUBKEY_LENGTH = 33
ANYONE_MARKER = 0

# The "anyone" counterparty is the private key with scalar 1 (public key G)
ANYONE_KEY = PrivateKey.from_int(1)


def _invoice_number(key_id: bytes) -> bytes:
    return (PROTOCOL + base64.b64encode(key_id).decode("ascii")).encode("utf-8")


def derive_child_private_key(private_key: PrivateKey, counterparty: PublicKey, invoice: bytes) -> PrivateKey:
    """
    Derive a BRC-42 child private key.

    The child key is ``private_key + HMAC(shared_point, invoice)`` where the
    shared point is ``counterparty * private_key`` in compressed form.
    """
    shared = counterparty.multiply(private_key.secret).format(compressed=True)
    tweak = hmac.new(shared, invoice, hashlib.sha256).digest()
    return private_key.add(tweak)


def derive_child_public_key(public_key: PublicKey, counterparty: PrivateKey, invoice: bytes) -> PublicKey:
    """Derive the public half of a BRC-42 child key from the other side."""
    shared = public_key.multiply(counterparty.secret).format(compressed=True)
    tweak = hmac.new(shared, invoice, hashlib.sha256).digest()
    return public_key.add(tweak)


def sign(message: bytes, signer: PrivateKey, verifier: Optional[PublicKey] = None) -> bytes:
    """
    Sign a message.

    Args:
        message: Raw message bytes.
        signer: The signer's identity key.
        verifier: Optional public key of the only party allowed to verify.
            When omitted anyone can verify.

    Returns:
        The serialized signed message.
    """
    recipient_anyone = verifier is None
    if recipient_anyone:
        verifier = ANYONE_KEY.public_key

    key_id = secrets.token_bytes(KEY_ID_LENGTH)
    signing_key = derive_child_private_key(signer, verifier, _invoice_number(key_id))
    signature = signing_key.sign(message)

    verifier_bytes = bytes([ANYONE_MARKER]) if recipient_anyone else verifier.format(compressed=True)
    return VERSION + signer.public_key.format(compressed=True) + verifier_bytes + key_id + signature


def signer_public_key(sig: bytes) -> PublicKey:
    """
    Return the signer identity key embedded in a signed message.

    Raises:
        SignatureFormatError: If the version or signer key is invalid.
    """
    _check_version(sig)
    raw = sig[len(VERSION):len(VERSION) + PUBKEY_LENGTH]
    if len(raw) != PUBKEY_LENGTH:
        raise SignatureFormatError("Signed message is truncated")
    try:
        return PublicKey(raw)
    except ValueError as e:
        raise SignatureFormatError(f"Invalid signer public key in signed message: {e}")


def _check_version(sig: bytes) -> None:
    version = sig[:len(VERSION)]
    if version != VERSION:
        raise SignatureFormatError(
            f"Message version mismatch: Expected {VERSION.hex()}, received {version.hex()}"
        )


def verify(message: bytes, sig: bytes, recipient: Optional[PrivateKey] = None) -> bool:
    """
    Verify a signed message.

    Args:
        message: Raw message bytes.
        sig: Serialized signed message from ``sign``.
        recipient: Private key of the addressed verifier. Not needed for
            messages signed for anyone.

    Returns:
        True if the signature is valid for the message.

    Raises:
        SignatureFormatError: If the signed message is malformed, or it is
            addressed to a verifier other than ``recipient``.
    """
    signer = signer_public_key(sig)
    pos = len(VERSION) + PUBKEY_LENGTH

    if len(sig) <= pos:
        raise SignatureFormatError("Signed message is truncated")

    if sig[pos] == ANYONE_MARKER:
        recipient = ANYONE_KEY
        pos += 1
    else:
        verifier_bytes = sig[pos:pos + PUBKEY_LENGTH]
        pos += PUBKEY_LENGTH
        if recipient is None:
            raise SignatureFormatError(
                "This signature can only be verified with knowledge of a specific private key. "
                f"The associated public key is: {verifier_bytes.hex()}"
            )
        expected = recipient.public_key.format(compressed=True)
        if verifier_bytes != expected:
            raise SignatureFormatError(
                f"The recipient public key is {expected.hex()} but the signature "
                f"requires the recipient to have public key {verifier_bytes.hex()}"
            )

    key_id = sig[pos:pos + KEY_ID_LENGTH]
    signature = sig[pos + KEY_ID_LENGTH:]
    if len(key_id) != KEY_ID_LENGTH or not signature:
        raise SignatureFormatError("Signed message is truncated")

    signing_key = derive_child_public_key(signer, recipient, _invoice_number(key_id))
    try:
        return signing_key.verify(signature, message)
    except ValueError as e:
        raise SignatureFormatError(f"Invalid DER signature in signed message: {e}")
