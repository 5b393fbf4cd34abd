"""
Token serialization and parsing.

A token is five pipe-delimited fields::

    pubkey|scheme|timestamp|request_path|signature
"""

import logging
from typing import Optional

from .errors import TokenFormatError
from .models import AuthToken, Scheme

logger = logging.getLogger(__name__)

DELIMITER = "|"
FIELD_COUNT = 5


def serialize_auth_token(
    pubkey: str,
    scheme: Scheme,
    timestamp: str,
    request_path: str,
    signature: str,
) -> str:
    """
    Join token fields into the wire format.

    Raises:
        TokenFormatError: If a field is empty or contains the delimiter.
    """
    fields = {
        "pubkey": pubkey,
        "scheme": Scheme(scheme).value,
        "timestamp": timestamp,
        "request_path": request_path,
        "signature": signature,
    }
    for name, value in fields.items():
        if not value:
            raise TokenFormatError(f"Token field '{name}' must not be empty")
        if DELIMITER in value:
            raise TokenFormatError(f"Token field '{name}' must not contain '{DELIMITER}': {value!r}")
    return DELIMITER.join(fields.values())


def parse_auth_token(token: str) -> Optional[AuthToken]:
    """
    Parse a serialized token.

    Purely syntactic: no signature, key or timestamp checks happen here.

    Args:
        token: The serialized token string.

    Returns:
        The parsed ``AuthToken``, or None if the token is malformed.
    """
    if not isinstance(token, str) or not token:
        return None

    parts = token.split(DELIMITER)
    if len(parts) != FIELD_COUNT:
        logger.debug(f"Token has {len(parts)} fields, expected {FIELD_COUNT}")
        return None
    if not all(parts):
        logger.debug("Token has an empty field")
        return None

    pubkey, scheme, timestamp, request_path, signature = parts
    try:
        scheme = Scheme(scheme)
    except ValueError:
        logger.debug(f"Unknown token scheme: {scheme!r}")
        return None

    return AuthToken(
        pubkey=pubkey,
        scheme=scheme,
        timestamp=timestamp,
        request_path=request_path,
        signature=signature,
    )
