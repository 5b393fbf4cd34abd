"""
Signature scheme registry.

Each ``Scheme`` member maps to exactly one ``SignatureScheme`` carrying the
token-level sign and verify routines. Both routines work on the canonical
message bytes and exchange signatures as base64 strings.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Union

from coincurve import PrivateKey, PublicKey

from . import bsm, signed_message
from .errors import SignatureFormatError
from .models import Scheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignatureScheme:
    """Sign/verify pair for one scheme."""

    scheme: Scheme
    sign: Callable[[bytes, PrivateKey], str]
    verify: Callable[[bytes, str, PublicKey], bool]


def _sign_brc77(message: bytes, private_key: PrivateKey) -> str:
    return base64.b64encode(signed_message.sign(message, private_key)).decode("ascii")


def _verify_brc77(message: bytes, signature: str, public_key: PublicKey) -> bool:
    try:
        sig = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise SignatureFormatError(f"BRC-77 signature is not valid base64: {e}")

    # The signed message names its own signer; it must be the token's key.
    signer = signed_message.signer_public_key(sig)
    if signer.format(compressed=True) != public_key.format(compressed=True):
        logger.debug("BRC-77 signer key does not match token public key")
        return False
    return signed_message.verify(message, sig)


_SCHEMES: Dict[Scheme, SignatureScheme] = {
    Scheme.BRC77: SignatureScheme(Scheme.BRC77, _sign_brc77, _verify_brc77),
    Scheme.BSM: SignatureScheme(Scheme.BSM, bsm.sign, bsm.verify),
}

if set(_SCHEMES) != set(Scheme):
    raise RuntimeError(f"No signature scheme registered for {set(Scheme) - set(_SCHEMES)}")


def get_scheme(scheme: Union[Scheme, str]) -> SignatureScheme:
    """
    Look up the sign/verify routines for a scheme.

    Raises:
        ValueError: If the scheme is unknown.
    """
    return _SCHEMES[Scheme(scheme)]
