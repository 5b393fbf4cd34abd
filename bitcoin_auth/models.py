"""
Bitcoin Auth data model.

``AuthPayload`` is the set of request facts being attested. The issuer signs
one and the verifier checks a token against one (the "target").
``AuthToken`` is the parsed form of a serialized token string.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Scheme(str, Enum):
    """Signature scheme used to produce a token's signature."""

    BRC77 = "brc77"  # modern signed message (BRC-77)
    BSM = "bsm"  # legacy Bitcoin Signed Message


class BodyEncoding(str, Enum):
    """How a request body string is turned into bytes before hashing."""

    UTF8 = "utf8"
    HEX = "hex"
    BASE64 = "base64"


@dataclass(frozen=True)
class AuthPayload:
    """
    Request attributes covered by a token signature.

    Attributes:
        request_path: Path plus query string, compared byte for byte.
        timestamp: ISO-8601 UTC timestamp with milliseconds, e.g.
            ``2023-10-27T10:00:00.000Z``.
        body: Optional request body, interpreted with a ``BodyEncoding``.
    """

    request_path: str
    timestamp: str
    body: Optional[str] = None


@dataclass(frozen=True)
class AuthToken:
    """
    A parsed authentication token.

    Attributes:
        pubkey: Hex encoded compressed secp256k1 public key of the signer.
        scheme: Signature scheme the token claims to use.
        timestamp: Timestamp the issuer signed.
        request_path: Request path the issuer signed.
        signature: Base64 signature over the canonical message.
    """

    pubkey: str
    scheme: Scheme
    timestamp: str
    request_path: str
    signature: str

    def to_payload(self, body: Optional[str] = None) -> AuthPayload:
        """Build the payload this token attests, with the caller's body."""
        return AuthPayload(request_path=self.request_path, timestamp=self.timestamp, body=body)

    def serialize(self) -> str:
        """Serialize back into the pipe-delimited wire format."""
        from .tokens import serialize_auth_token

        return serialize_auth_token(
            pubkey=self.pubkey,
            scheme=self.scheme,
            timestamp=self.timestamp,
            request_path=self.request_path,
            signature=self.signature,
        )
