"""
Bitcoin Auth Verifier - Checks auth tokens against the request being served.

Verification never raises for bad input: every failure, including a
signature that is structurally wrong for its declared scheme, is reported as
``False`` and logged at DEBUG level with the reason.
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple, Union

from . import config
from .canonical import build_message, hash_body, parse_timestamp
from .errors import BitcoinAuthError
from .keys import parse_public_key
from .models import AuthPayload, AuthToken, BodyEncoding
from .schemes import get_scheme
from .tokens import parse_auth_token

logger = logging.getLogger(__name__)


def _reject(reason: str) -> Tuple[bool, None]:
    logger.debug(f"Auth token rejected: {reason}")
    return False, None


def check_auth_token(
    token: str,
    target: AuthPayload,
    time_pad: int = config.TIME_PAD_MINUTES,
    body_encoding: Optional[Union[BodyEncoding, str]] = None,
    max_age: Optional[int] = None,
) -> Tuple[bool, Optional[AuthToken]]:
    """
    Verify a token and return the parsed token on success.

    Args:
        token: Serialized token from the request.
        target: The request as the server sees it. Its timestamp is the
            server's reference time (usually now).
        time_pad: Minutes a token timestamp may run ahead of the target time.
        body_encoding: Encoding of ``target.body``. Defaults to the
            configured body encoding.
        max_age: Optional minutes a token timestamp may lag behind the target
            time. None leaves old tokens unbounded.

    Returns:
        Tuple of (is_valid, AuthToken or None).
    """
    if body_encoding is None:
        body_encoding = config.get_default_body_encoding()

    parsed = parse_auth_token(token)
    if parsed is None:
        return _reject("malformed token")

    if parsed.request_path != target.request_path:
        return _reject(f"path mismatch ({parsed.request_path!r} != {target.request_path!r})")

    try:
        token_time = parse_timestamp(parsed.timestamp)
        target_time = parse_timestamp(target.timestamp)
    except ValueError as e:
        return _reject(f"unparseable timestamp: {e}")

    try:
        if token_time > target_time + timedelta(minutes=time_pad):
            return _reject(f"timestamp {parsed.timestamp} is more than {time_pad} minutes ahead")
        if max_age is not None and token_time < target_time - timedelta(minutes=max_age):
            return _reject(f"timestamp {parsed.timestamp} is more than {max_age} minutes old")
    except OverflowError:
        return _reject("timestamp window out of range")

    try:
        public_key = parse_public_key(parsed.pubkey)
    except BitcoinAuthError as e:
        return _reject(str(e))

    try:
        body_hash = hash_body(target.body, body_encoding)
    except BitcoinAuthError as e:
        return _reject(str(e))

    message = build_message(parsed.request_path, parsed.timestamp, body_hash)

    try:
        valid = get_scheme(parsed.scheme).verify(message, parsed.signature, public_key)
    except BitcoinAuthError as e:
        return _reject(f"{parsed.scheme.value} signature format: {e}")

    if not valid:
        return _reject("signature mismatch")
    return True, parsed


def verify_auth_token(
    token: str,
    target: AuthPayload,
    time_pad: int = config.TIME_PAD_MINUTES,
    body_encoding: Optional[Union[BodyEncoding, str]] = None,
    max_age: Optional[int] = None,
) -> bool:
    """
    Verify a token against a target payload.

    Returns:
        True if the token is valid for the target, otherwise False.
    """
    valid, _ = check_auth_token(token, target, time_pad, body_encoding, max_age)
    return valid


class Verifier:
    """
    Verifies auth tokens with fixed window and encoding settings.

    Example:
        >>> verifier = Verifier(time_pad=5)
        >>> target = AuthPayload(request_path="/api/data", timestamp=format_timestamp(), body=body)
        >>> verifier.verify(request.headers["X-Auth-Token"], target)
        True
    """

    def __init__(
        self,
        time_pad: int = config.TIME_PAD_MINUTES,
        body_encoding: Optional[Union[BodyEncoding, str]] = None,
        max_age: Optional[int] = None,
    ):
        self.time_pad = time_pad
        self.body_encoding = (
            BodyEncoding(body_encoding)
            if body_encoding is not None
            else config.get_default_body_encoding()
        )
        self.max_age = max_age

    def check(self, token: str, target: AuthPayload) -> Tuple[bool, Optional[AuthToken]]:
        """Verify a token, returning (is_valid, AuthToken or None)."""
        return check_auth_token(token, target, self.time_pad, self.body_encoding, self.max_age)

    def verify(self, token: str, target: AuthPayload) -> bool:
        """Verify a token, returning only the verdict."""
        return self.check(token, target)[0]
