"""
Unit tests for the didjws command line.
"""

import json

import pytest

from didjws import config
from didjws.cli import main, parse_claims
from didjws.did import did_from_public_key
from didjws.encoding import b64url_decode
from didjws.keystore import public_key_bytes


class TestParseClaims:
    """Tests for parse_claims()."""

    def test_strings_and_numbers(self):
        claims = parse_claims(["aud=broker.testnet", "size=42", "ratio=0.5"])
        assert claims == {"aud": "broker.testnet", "size": 42, "ratio": 0.5}

    def test_non_numeric_json_stays_string(self):
        claims = parse_claims(["flag=true", "list=[1]", "nan=NaN", "empty="])
        assert claims == {"flag": "true", "list": "[1]", "nan": "NaN", "empty": ""}

    def test_value_may_contain_equals(self):
        assert parse_claims(["note=a=b"]) == {"note": "a=b"}

    def test_rejects_malformed(self):
        with pytest.raises(ValueError):
            parse_claims(["aud"])


class TestCliCommands:
    """Tests for CLI commands."""

    def test_did(self, private_key, capsys):
        """did prints the did:key of the key."""
        assert main(["did", "--key", private_key.export_private()]) == 0
        out = capsys.readouterr().out.strip()
        assert out == did_from_public_key(public_key_bytes(private_key))

    def test_did_missing_key(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "PRIVATE_KEY", None)
        assert main(["did"]) == 1
        assert "Missing private key" in capsys.readouterr().err

    def test_issue(self, private_key, capsys):
        """issue prints a token carrying the requested claims."""
        code = main([
            "issue",
            "--key", private_key.export_private(),
            "--account", "account.testnet",
            "--network", "testnet",
            "--claim", "aud=broker.testnet",
            "--expiry", "60",
        ])
        assert code == 0

        token = capsys.readouterr().out.strip()
        payload = json.loads(b64url_decode(token.split(".")[1]))
        assert payload["iss"] == "account.testnet"
        assert payload["aud"] == "broker.testnet"
        assert payload["exp"] - payload["iat"] == 60

    def test_issue_header(self, private_key, capsys):
        """--header prints an Authorization header line."""
        main([
            "issue",
            "--key", private_key.export_private(),
            "--account", "account.testnet",
            "--network", "testnet",
            "--header",
        ])
        assert capsys.readouterr().out.startswith("Authorization: Bearer ")

    def test_issue_strict_rejects_override(self, private_key, capsys):
        code = main([
            "issue",
            "--key", private_key.export_private(),
            "--account", "account.testnet",
            "--network", "testnet",
            "--claim", "exp=1",
            "--strict",
        ])
        assert code == 1
        assert "exp" in capsys.readouterr().err

    def test_issue_missing_identity(self, private_key, monkeypatch, capsys):
        monkeypatch.setattr(config, "ACCOUNT_ID", None)
        assert main(["issue", "--key", private_key.export_private(), "--network", "testnet"]) == 1
        assert "Missing identity" in capsys.readouterr().err

    def test_issue_invalid_key(self, capsys):
        code = main(["issue", "--key", "not-json", "--account", "a.testnet", "--network", "testnet"])
        assert code == 1
        assert "Invalid JWK" in capsys.readouterr().err

    def test_config(self, capsys):
        assert main(["config"]) == 0
        assert "DEFAULT_EXPIRY_SECONDS" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out
