"""
Canonical message construction shared by the issuer and the verifier.

The signed message is ``request_path|timestamp|body_hash`` where ``body_hash``
is the lowercase hex SHA-256 of the decoded request body, or an empty string
when there is no body. Both sides must build it byte for byte identically.
"""

import base64
import binascii
import hashlib
from datetime import datetime, timezone
from typing import Optional, Union

from .errors import BodyEncodingError
from .models import BodyEncoding

MESSAGE_SEPARATOR = "|"


def decode_body(body: str, encoding: Union[BodyEncoding, str] = BodyEncoding.UTF8) -> bytes:
    """
    Turn a body string into the bytes that get hashed.

    Hex bodies go through ``bytes.fromhex``: odd-length input and non-hex
    characters such as a ``0x`` prefix are refused, never padded or stripped.

    Raises:
        BodyEncodingError: If the body is not valid for the encoding, or the
            encoding is unknown.
    """
    try:
        encoding = BodyEncoding(encoding)
    except ValueError:
        raise BodyEncodingError(f"Unknown body encoding: {encoding!r}")

    try:
        if encoding is BodyEncoding.HEX:
            return bytes.fromhex(body)
        if encoding is BodyEncoding.BASE64:
            return base64.b64decode(body, validate=True)
        return body.encode("utf-8")
    except (ValueError, binascii.Error) as e:
        raise BodyEncodingError(f"Body is not valid {encoding.value}: {e}")


def hash_body(body: Optional[str], encoding: Union[BodyEncoding, str] = BodyEncoding.UTF8) -> str:
    """Lowercase hex SHA-256 of the decoded body, or "" when there is no body."""
    if not body:
        return ""
    return hashlib.sha256(decode_body(body, encoding)).hexdigest()


def build_message(request_path: str, timestamp: str, body_hash: str) -> bytes:
    """Assemble the canonical message bytes that get signed."""
    return MESSAGE_SEPARATOR.join((request_path, timestamp, body_hash)).encode("utf-8")


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC. Defaults to the current time.

    Example:
        >>> format_timestamp(datetime(2023, 10, 27, 10, 0, tzinfo=timezone.utc))
        '2023-10-27T10:00:00.000Z'
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp.
    """
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
