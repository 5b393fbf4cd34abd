"""
Bitcoin Auth Signer - Issues auth tokens for REST API requests.

A token proves possession of a private key by signing the canonical message
``request_path|timestamp|body_hash`` and carrying the public key, scheme,
timestamp and path alongside the signature.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from . import config
from .canonical import build_message, format_timestamp, hash_body, parse_timestamp
from .errors import TokenFormatError
from .keys import PrivateKeyLike, load_private_key, public_key_hex
from .models import BodyEncoding, Scheme
from .schemes import get_scheme
from .tokens import serialize_auth_token

logger = logging.getLogger(__name__)


class Signer:
    """
    Issues auth tokens with a single private key.

    Example:
        >>> signer = Signer(private_key="L1...")
        >>> token = signer.sign("/api/data", body='{"message":"hi"}')

        # Legacy scheme with a fixed timestamp
        >>> token = signer.sign("/api/data", scheme="bsm", timestamp="2023-10-27T10:00:00.000Z")
    """

    def __init__(
        self,
        private_key: PrivateKeyLike,
        scheme: Optional[Union[Scheme, str]] = None,
        body_encoding: Optional[Union[BodyEncoding, str]] = None,
    ):
        """
        Initialize the Signer.

        Args:
            private_key: WIF string, hex secret, or ``coincurve.PrivateKey``.
            scheme: Default scheme for issued tokens (config default: brc77).
            body_encoding: Default body encoding (config default: utf8).

        Raises:
            InvalidKeyError: If the private key cannot be loaded.
            ValueError: If the scheme or body encoding is unknown.
        """
        self._key = load_private_key(private_key)
        self.public_key_hex = public_key_hex(self._key)
        self.scheme = Scheme(scheme) if scheme is not None else config.get_default_scheme()
        self.body_encoding = (
            BodyEncoding(body_encoding)
            if body_encoding is not None
            else config.get_default_body_encoding()
        )

    def sign(
        self,
        request_path: str,
        body: Optional[str] = None,
        scheme: Optional[Union[Scheme, str]] = None,
        body_encoding: Optional[Union[BodyEncoding, str]] = None,
        timestamp: Optional[Union[str, datetime]] = None,
    ) -> str:
        """
        Issue a token for one request.

        Args:
            request_path: Path plus query string, exactly as the server will see it.
            body: Optional request body.
            scheme: Override the signer's default scheme.
            body_encoding: Override the signer's default body encoding.
            timestamp: Explicit timestamp (ISO-8601 string or datetime).
                Defaults to the current UTC time.

        Returns:
            The serialized token string.

        Raises:
            TokenFormatError: If the path or timestamp cannot be carried in a token.
            BodyEncodingError: If the body does not decode with the encoding.
        """
        scheme = Scheme(scheme) if scheme is not None else self.scheme
        encoding = BodyEncoding(body_encoding) if body_encoding is not None else self.body_encoding
        timestamp = self._resolve_timestamp(timestamp)

        message = build_message(request_path, timestamp, hash_body(body, encoding))
        signature = get_scheme(scheme).sign(message, self._key)

        token = serialize_auth_token(
            pubkey=self.public_key_hex,
            scheme=scheme,
            timestamp=timestamp,
            request_path=request_path,
            signature=signature,
        )
        logger.debug(f"Issued {scheme.value} token for {request_path} at {timestamp}")
        return token

    @staticmethod
    def _resolve_timestamp(timestamp: Optional[Union[str, datetime]]) -> str:
        if timestamp is None:
            return format_timestamp()
        if isinstance(timestamp, datetime):
            return format_timestamp(timestamp)
        try:
            parse_timestamp(timestamp)
        except ValueError as e:
            raise TokenFormatError(f"Invalid token timestamp {timestamp!r}: {e}")
        return timestamp


def get_auth_token(
    private_key: PrivateKeyLike,
    request_path: str,
    body: Optional[str] = None,
    scheme: Optional[Union[Scheme, str]] = None,
    body_encoding: Optional[Union[BodyEncoding, str]] = None,
    timestamp: Optional[Union[str, datetime]] = None,
) -> str:
    """
    Issue an auth token for a request.

    Args:
        private_key: WIF string, hex secret, or ``coincurve.PrivateKey``.
        request_path: Path plus query string.
        body: Optional request body.
        scheme: ``brc77`` (default) or ``bsm``.
        body_encoding: ``utf8`` (default), ``hex`` or ``base64``.
        timestamp: Explicit timestamp, defaults to now.

    Returns:
        The serialized token ``pubkey|scheme|timestamp|request_path|signature``.
    """
    return Signer(private_key).sign(
        request_path,
        body=body,
        scheme=scheme,
        body_encoding=body_encoding,
        timestamp=timestamp,
    )
