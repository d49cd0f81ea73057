"""
Unit tests for the httpx bearer auth flow.
"""

import json

import httpx
import pytest

from didjws import BearerTokenAuth, TokenIssuer
from didjws.encoding import b64url_decode

ACCOUNT_ID = "account.testnet"
NETWORK_ID = "network.id"
AUDIENCE = "broker.testnet"


def payload_of(authorization: str) -> dict:
    scheme, token = authorization.split(" ", 1)
    assert scheme == "Bearer"
    return json.loads(b64url_decode(token.split(".")[1]))


class TestBearerTokenAuth:
    """Tests for BearerTokenAuth."""

    @pytest.mark.asyncio
    async def test_attaches_bearer_token(self, keystore_signer):
        """Requests carry a bearer token with the broker as audience."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["Authorization"])
            return httpx.Response(200, json={"id": "request-1"})

        auth = BearerTokenAuth(keystore_signer, ACCOUNT_ID, NETWORK_ID, audience=AUDIENCE)
        async with httpx.AsyncClient(auth=auth, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("https://broker.example/storagerequest/request-1")

        assert response.status_code == 200
        payload = payload_of(seen[0])
        assert payload["iss"] == ACCOUNT_ID
        assert payload["aud"] == AUDIENCE
        assert payload["sub"].startswith("did:key:z")

    @pytest.mark.asyncio
    async def test_fresh_token_per_request(self, keystore_signer):
        """Each request gets a newly issued token."""
        seen = []
        ticks = iter([1700000000, 1700000005])

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["Authorization"])
            return httpx.Response(200)

        auth = BearerTokenAuth(
            keystore_signer,
            ACCOUNT_ID,
            NETWORK_ID,
            audience=AUDIENCE,
            issuer=TokenIssuer(clock=lambda: next(ticks)),
        )
        async with httpx.AsyncClient(auth=auth, transport=httpx.MockTransport(handler)) as client:
            await client.post("https://broker.example/upload", content=b"data")
            await client.get("https://broker.example/storagerequest/1")

        assert payload_of(seen[1])["iat"] == payload_of(seen[0])["iat"] + 5

    @pytest.mark.asyncio
    async def test_extra_claims(self, keystore_signer):
        """Configured claims are added to every token."""
        auth = BearerTokenAuth(keystore_signer, ACCOUNT_ID, NETWORK_ID, claims={"region": "eu"})
        token = await auth.token()
        payload = json.loads(b64url_decode(token.split(".")[1]))

        assert payload["region"] == "eu"
        assert "aud" not in payload

    def test_sync_client_unsupported(self, fixed_signer):
        """Synchronous clients are rejected."""
        auth = BearerTokenAuth(fixed_signer, ACCOUNT_ID, NETWORK_ID)
        transport = httpx.MockTransport(lambda request: httpx.Response(200))
        with httpx.Client(auth=auth, transport=transport) as client:
            with pytest.raises(RuntimeError, match="AsyncClient"):
                client.get("https://broker.example/")
