"""
Shared pytest fixtures for bitcoin-auth tests.
"""

import json

import pytest
from coincurve import PrivateKey

from bitcoin_auth.keys import private_key_to_wif, public_key_hex


@pytest.fixture
def private_key() -> PrivateKey:
    """Generate a fresh private key for testing."""
    return PrivateKey()


@pytest.fixture
def wif(private_key: PrivateKey) -> str:
    """WIF encoding of the test private key."""
    return private_key_to_wif(private_key)


@pytest.fixture
def pubkey_hex(private_key: PrivateKey) -> str:
    """Hex compressed public key of the test private key."""
    return public_key_hex(private_key)


@pytest.fixture
def static_key() -> PrivateKey:
    """A fixed private key (DO NOT USE OUTSIDE TESTS)."""
    return PrivateKey(bytes.fromhex("1f" * 32))


@pytest.fixture
def fixed_timestamp() -> str:
    """A fixed token timestamp."""
    return "2023-10-27T10:00:00.000Z"


@pytest.fixture
def request_path() -> str:
    return "/test/auth_path"


@pytest.fixture
def request_path_with_query() -> str:
    return "/test/auth_path?param1=value1&another=val2&third=true"


@pytest.fixture
def request_body() -> str:
    """Sample JSON request body."""
    return json.dumps({"data": "testPayload", "value": 123})
