"""
Tests for the bitcoin-auth command line interface.
"""

import json

import pytest

from bitcoin_auth import config
from bitcoin_auth.cli import main
from bitcoin_auth.encryption import encrypt
from bitcoin_auth.keys import public_key_hex


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out.strip(), err.strip()


class TestSignCommand:
    """Tests for `bitcoin-auth sign`."""

    def test_sign_with_key(self, capsys, wif, pubkey_hex, fixed_timestamp):
        """sign prints a token for the given path."""
        code, out, _ = run(capsys, "sign", "/api/data", "--key", wif, "--timestamp", fixed_timestamp)
        assert code == 0
        assert out.startswith(f"{pubkey_hex}|brc77|{fixed_timestamp}|/api/data|")

    def test_sign_from_env(self, capsys, monkeypatch, wif, pubkey_hex):
        """sign reads the private key from the environment."""
        monkeypatch.setenv(config.PRIVATE_KEY_ENV, wif)
        code, out, _ = run(capsys, "sign", "/api/data", "--scheme", "bsm")
        assert code == 0
        assert out.split("|")[:2] == [pubkey_hex, "bsm"]

    def test_sign_header(self, capsys, wif):
        """--header prefixes the auth header name."""
        code, out, _ = run(capsys, "sign", "/api/data", "--key", wif, "--header")
        assert code == 0
        assert out.startswith(f"{config.AUTH_HEADER}: ")
        name, _, token = out.partition(": ")
        assert config.auth_headers(token) == {name: token}

    def test_sign_missing_key(self, capsys, monkeypatch):
        """sign fails without a key."""
        monkeypatch.delenv(config.PRIVATE_KEY_ENV, raising=False)
        code, _, err = run(capsys, "sign", "/api/data")
        assert code == 1
        assert "Missing private key" in err

    def test_sign_invalid_key(self, capsys):
        """sign reports an invalid key."""
        code, _, err = run(capsys, "sign", "/api/data", "--key", "nope")
        assert code == 1
        assert err.startswith("Error:")


class TestVerifyCommand:
    """Tests for `bitcoin-auth verify`."""

    def test_verify_valid(self, capsys, wif, fixed_timestamp):
        """verify exits 0 for a valid token."""
        _, token, _ = run(capsys, "sign", "/api/data", "--key", wif, "--body", "{}", "--timestamp", fixed_timestamp)
        code, out, _ = run(
            capsys, "verify", token, "--path", "/api/data", "--body", "{}", "--timestamp", fixed_timestamp
        )
        assert code == 0
        assert "VALID" in out

    def test_verify_json(self, capsys, wif, pubkey_hex, fixed_timestamp):
        """verify --json reports the token fields."""
        _, token, _ = run(capsys, "sign", "/api/data", "--key", wif, "--timestamp", fixed_timestamp)
        code, out, _ = run(capsys, "verify", token, "--path", "/api/data", "--timestamp", fixed_timestamp, "--json")
        result = json.loads(out)
        assert code == 0
        assert result["valid"] is True
        assert result["pubkey"] == pubkey_hex
        assert result["scheme"] == "brc77"

    def test_verify_invalid(self, capsys, wif, fixed_timestamp):
        """verify exits 1 for a token issued for another path."""
        _, token, _ = run(capsys, "sign", "/api/data", "--key", wif, "--timestamp", fixed_timestamp)
        code, out, _ = run(capsys, "verify", token, "--path", "/api/other", "--timestamp", fixed_timestamp)
        assert code == 1
        assert "INVALID" in out


class TestParseCommand:
    """Tests for `bitcoin-auth parse`."""

    def test_parse_json(self, capsys, wif, fixed_timestamp):
        """parse --json prints the token fields."""
        _, token, _ = run(capsys, "sign", "/api/data?x=1", "--key", wif, "--timestamp", fixed_timestamp)
        code, out, _ = run(capsys, "parse", token, "--json")
        fields = json.loads(out)
        assert code == 0
        assert fields["request_path"] == "/api/data?x=1"
        assert fields["timestamp"] == fixed_timestamp

    def test_parse_malformed(self, capsys):
        """parse exits 1 for a malformed token."""
        code, _, err = run(capsys, "parse", "a|b|c")
        assert code == 1
        assert "Malformed" in err


class TestEncryptionCommands:
    """Tests for `bitcoin-auth encrypt` / `decrypt`."""

    def test_decrypt(self, capsys, private_key, wif, static_key):
        """decrypt recovers a message encrypted for the key holder."""
        ciphertext = encrypt(static_key, public_key_hex(private_key), "hello")
        code, out, _ = run(capsys, "decrypt", public_key_hex(static_key), ciphertext, "--key", wif)
        assert code == 0
        assert out == "hello"

    def test_encrypt_invalid_recipient(self, capsys, wif):
        """encrypt reports a malformed recipient key."""
        code, _, err = run(capsys, "encrypt", "zz", "hello", "--key", wif)
        assert code == 1
        assert "recipient public key" in err


def test_no_command_prints_help(capsys):
    """Running without a command prints help and exits 0."""
    code, out, _ = run(capsys)
    assert code == 0
    assert "usage" in out.lower()
