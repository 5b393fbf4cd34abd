"""
Bitcoin Auth exceptions.

Every error raised by the library derives from ``BitcoinAuthError``. The
concrete errors also derive from ``ValueError`` so callers that already guard
against bad input with ``except ValueError`` keep working.
"""


class BitcoinAuthError(Exception):
    """Base class for all bitcoin-auth errors."""


class InvalidKeyError(BitcoinAuthError, ValueError):
    """A private or public key could not be loaded."""


class TokenFormatError(BitcoinAuthError, ValueError):
    """A token field cannot be serialized into the pipe-delimited format."""


class BodyEncodingError(BitcoinAuthError, ValueError):
    """A request body could not be decoded with the declared encoding."""


class SignatureFormatError(BitcoinAuthError, ValueError):
    """A signature is structurally invalid for the scheme it was checked under."""


class DecryptionError(BitcoinAuthError, ValueError):
    """A ciphertext could not be decrypted or failed authentication."""
