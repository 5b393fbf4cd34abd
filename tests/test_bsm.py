"""
Unit tests for legacy Bitcoin Signed Message signatures.
"""

import base64

import pytest
from coincurve import PrivateKey

from bitcoin_auth import bsm
from bitcoin_auth.errors import SignatureFormatError


class TestMagicHash:
    """Tests for the message digest."""

    def test_digest_length(self):
        """magic_hash() returns a 32-byte digest."""
        assert len(bsm.magic_hash(b"hello")) == 32

    def test_long_message_uses_multibyte_varint(self):
        """Messages of 253+ bytes hash without error and differ from short ones."""
        assert bsm.magic_hash(b"a" * 300) != bsm.magic_hash(b"a" * 30)


class TestBsmSignVerify:
    """Tests for bsm.sign() / bsm.verify()."""

    def test_signature_is_compact_base64(self, private_key):
        """Signatures are base64 of 65 bytes with a compressed-key header."""
        raw = base64.b64decode(bsm.sign(b"hello", private_key))
        assert len(raw) == 65
        assert 31 <= raw[0] <= 34

    def test_verify_valid(self, private_key):
        """A signature verifies against its own key."""
        signature = bsm.sign(b"hello", private_key)
        assert bsm.verify(b"hello", signature, private_key.public_key) is True

    def test_verify_wrong_message(self, private_key):
        """A signature does not verify for another message."""
        signature = bsm.sign(b"hello", private_key)
        assert bsm.verify(b"hellO", signature, private_key.public_key) is False

    def test_verify_wrong_key(self, private_key):
        """A signature does not verify against another key."""
        signature = bsm.sign(b"hello", private_key)
        assert bsm.verify(b"hello", signature, PrivateKey().public_key) is False

    def test_recover_public_key(self, private_key):
        """The signer's key can be recovered from the signature."""
        signature = bsm.sign(b"hello", private_key)
        recovered = bsm.recover_public_key(b"hello", signature)
        assert recovered.format() == private_key.public_key.format()

    def test_not_base64(self, private_key):
        """Non-base64 input raises SignatureFormatError."""
        with pytest.raises(SignatureFormatError):
            bsm.verify(b"hello", "%%%", private_key.public_key)

    def test_wrong_length(self, private_key):
        """A signature of the wrong size raises SignatureFormatError."""
        short = base64.b64encode(b"\x1f" * 70).decode()
        with pytest.raises(SignatureFormatError, match="65 bytes"):
            bsm.verify(b"hello", short, private_key.public_key)

    def test_bad_header(self, private_key):
        """A header byte outside 27..34 raises SignatureFormatError."""
        raw = bytearray(base64.b64decode(bsm.sign(b"hello", private_key)))
        raw[0] = 1
        with pytest.raises(SignatureFormatError, match="header"):
            bsm.verify(b"hello", base64.b64encode(bytes(raw)).decode(), private_key.public_key)


class TestBsmKnownAnswers:
    """Fixed outputs shared with other Bitcoin Signed Message implementations."""

    KEY = PrivateKey(bytes.fromhex("1f" * 32))
    MESSAGE = b"/api/static/vector|2023-10-27T10:00:00.000Z|"

    def test_magic_hash(self):
        """The magic hash matches the reference digest."""
        assert bsm.magic_hash(self.MESSAGE).hex() == (
            "d129501ee6a7e7eb2e2292c4fc3c0520920640f668c929e611bd9542d96e0f4d"
        )

    def test_signature(self):
        """Deterministic (RFC 6979) signing yields the reference signature."""
        assert bsm.sign(self.MESSAGE, self.KEY) == (
            "IGBMjczrlwJ9LRuSP5Ff27nL0DpMAp7Z/FWEgIMvD58wAh16uPgSapoJbHSqZ2srOh23QM1LlnP90lI8n6yPVoQ="
        )

    def test_reference_signature_verifies(self):
        """The reference signature recovers the signer's key."""
        signature = "IGBMjczrlwJ9LRuSP5Ff27nL0DpMAp7Z/FWEgIMvD58wAh16uPgSapoJbHSqZ2srOh23QM1LlnP90lI8n6yPVoQ="
        assert bsm.verify(self.MESSAGE, signature, self.KEY.public_key) is True
