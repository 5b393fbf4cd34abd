"""
Payload encryption between two key holders.

Both parties derive the same shared secret with ECDH:

- Sender: sender_private_key * recipient_public_key
- Recipient: recipient_private_key * sender_public_key

The x coordinate of the shared point is the AES-256-GCM key. Ciphertexts are
hex encoded ``iv (32) || ciphertext || tag (16)``.
"""

import logging
import os

from coincurve import PublicKey
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionError, InvalidKeyError
from .keys import PrivateKeyLike, load_private_key, parse_public_key

logger = logging.getLogger(__name__)

IV_LENGTH = 32
TAG_LENGTH = 16


def _symmetric_key(private_key: PrivateKeyLike, counterparty_public_key: str, role: str) -> bytes:
    try:
        counterparty: PublicKey = parse_public_key(counterparty_public_key)
    except InvalidKeyError as e:
        raise InvalidKeyError(
            f"Invalid {role} public key format (expected hex compressed secp256k1 point): {e}"
        )
    key = load_private_key(private_key)
    shared_point = counterparty.multiply(key.secret)
    return shared_point.format(compressed=True)[1:]


def encrypt(sender_private_key: PrivateKeyLike, recipient_public_key: str, plaintext: str) -> str:
    """
    Encrypt a message for a counterparty.

    Args:
        sender_private_key: Sender's private key.
        recipient_public_key: Recipient's public key (hex string).
        plaintext: Message to encrypt.

    Returns:
        Ciphertext as a hex string.

    Raises:
        InvalidKeyError: If either key is malformed.
    """
    key = _symmetric_key(sender_private_key, recipient_public_key, "recipient")
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    return (iv + sealed).hex()


def decrypt(recipient_private_key: PrivateKeyLike, sender_public_key: str, ciphertext: str) -> str:
    """
    Decrypt a message from a counterparty.

    Args:
        recipient_private_key: Recipient's private key.
        sender_public_key: Sender's public key (hex string).
        ciphertext: Hex ciphertext produced by ``encrypt``.

    Returns:
        The decrypted plaintext.

    Raises:
        InvalidKeyError: If either key is malformed.
        DecryptionError: If the ciphertext is malformed or fails authentication.
    """
    key = _symmetric_key(recipient_private_key, sender_public_key, "sender")
    try:
        raw = bytes.fromhex(ciphertext)
    except ValueError as e:
        raise DecryptionError(f"Ciphertext is not valid hex: {e}")
    if len(raw) < IV_LENGTH + TAG_LENGTH:
        raise DecryptionError("Ciphertext is too short")

    try:
        plaintext = AESGCM(key).decrypt(raw[:IV_LENGTH], raw[IV_LENGTH:], None)
    except InvalidTag:
        logger.debug("AES-GCM authentication failed")
        raise DecryptionError("Decryption failed: wrong key or tampered ciphertext")
    return plaintext.decode("utf-8")
