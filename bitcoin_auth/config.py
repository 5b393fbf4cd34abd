# bitcoin_auth/config.py
"""
Centralized configuration for bitcoin-auth.

All configurable values are read from environment variables with sensible defaults.
Explicit arguments to the issuer and verifier always take precedence.

Usage:
    from bitcoin_auth.config import TIME_PAD_MINUTES, AUTH_HEADER

Environment Variables:
    BITCOIN_AUTH_TIME_PAD_MINUTES: Allowed forward clock skew in minutes (default: 5)
    BITCOIN_AUTH_DEFAULT_SCHEME: Signature scheme for new tokens (default: brc77)
    BITCOIN_AUTH_BODY_ENCODING: Encoding of request bodies (default: utf8)
    BITCOIN_AUTH_HEADER: Request header that carries the token (default: X-Auth-Token)
    BITCOIN_AUTH_PRIVATE_KEY: WIF private key used by the CLI
"""

import os
from typing import Dict, Final, Optional

from .models import BodyEncoding, Scheme

# =============================================================================
# Token Defaults
# =============================================================================

# How far (in minutes) a token timestamp may run ahead of the verifier's clock
TIME_PAD_MINUTES: Final[int] = int(os.getenv("BITCOIN_AUTH_TIME_PAD_MINUTES", "5"))

SCHEME_ENV: Final[str] = "BITCOIN_AUTH_DEFAULT_SCHEME"
BODY_ENCODING_ENV: Final[str] = "BITCOIN_AUTH_BODY_ENCODING"

DEFAULT_SCHEME: Final[str] = os.getenv(SCHEME_ENV, Scheme.BRC77.value)

DEFAULT_BODY_ENCODING: Final[str] = os.getenv(
    BODY_ENCODING_ENV,
    BodyEncoding.UTF8.value
)

# =============================================================================
# Transport
# =============================================================================

AUTH_HEADER: Final[str] = os.getenv("BITCOIN_AUTH_HEADER", "X-Auth-Token")

PRIVATE_KEY_ENV: Final[str] = "BITCOIN_AUTH_PRIVATE_KEY"

# =============================================================================
# Helper Functions
# =============================================================================


def get_default_scheme() -> Scheme:
    """
    Resolve the configured default scheme.

    Reads the environment at call time, so a changed setting applies to the
    next token without a reload.

    Raises:
        ValueError: If BITCOIN_AUTH_DEFAULT_SCHEME names an unknown scheme.
    """
    return Scheme(os.getenv(SCHEME_ENV, Scheme.BRC77.value))


def get_default_body_encoding() -> BodyEncoding:
    """
    Resolve the configured default body encoding.

    Both the issuer and the verifier fall back to this, so they always agree.

    Raises:
        ValueError: If BITCOIN_AUTH_BODY_ENCODING names an unknown encoding.
    """
    return BodyEncoding(os.getenv(BODY_ENCODING_ENV, BodyEncoding.UTF8.value))


def get_private_key() -> Optional[str]:
    """Return the WIF private key from the environment, if set."""
    return os.environ.get(PRIVATE_KEY_ENV) or None


def auth_headers(token: str) -> Dict[str, str]:
    """
    Build the request headers that carry a token.

    Args:
        token: A serialized auth token.

    Returns:
        Dict with the configured header name mapped to the token.
    """
    return {AUTH_HEADER: token}


# =============================================================================
# Configuration Summary (for debugging)
# =============================================================================

def print_config() -> None:
    """Print current configuration (useful for debugging)."""
    print("bitcoin-auth Configuration:")
    print(f"  TIME_PAD_MINUTES:      {TIME_PAD_MINUTES}")
    print(f"  DEFAULT_SCHEME:        {DEFAULT_SCHEME}")
    print(f"  DEFAULT_BODY_ENCODING: {DEFAULT_BODY_ENCODING}")
    print(f"  AUTH_HEADER:           {AUTH_HEADER}")


if __name__ == "__main__":
    print_config()
