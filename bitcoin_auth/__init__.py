"""
bitcoin-auth - Authenticate REST API requests with Bitcoin keys.

Clients sign ``request_path|timestamp|body_hash`` with a secp256k1 key and
send the result as a compact pipe-delimited token. Servers verify the token
against the request they received, with no session store.
"""

__version__ = "0.1.0"

# Data model
from .models import AuthPayload, AuthToken, BodyEncoding, Scheme

# Core signing/verification
from .signer import Signer, get_auth_token
from .verifier import Verifier, check_auth_token, verify_auth_token
from .tokens import parse_auth_token

# Payload encryption
from .encryption import encrypt, decrypt

from .errors import (
    BitcoinAuthError,
    BodyEncodingError,
    DecryptionError,
    InvalidKeyError,
    SignatureFormatError,
    TokenFormatError,
)

__all__ = [
    "__version__",
    # Model
    "AuthPayload",
    "AuthToken",
    "BodyEncoding",
    "Scheme",
    # Core
    "Signer",
    "get_auth_token",
    "Verifier",
    "check_auth_token",
    "verify_auth_token",
    "parse_auth_token",
    # Encryption
    "encrypt",
    "decrypt",
    # Errors
    "BitcoinAuthError",
    "BodyEncodingError",
    "DecryptionError",
    "InvalidKeyError",
    "SignatureFormatError",
    "TokenFormatError",
]
