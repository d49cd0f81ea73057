"""
HTTP bearer authentication for broker requests.

Attaches a freshly issued token to every outgoing request as
``Authorization: Bearer <token>``, with the broker as the token audience.

Example:
    >>> auth = BearerTokenAuth(signer, "account.testnet", "testnet", audience="broker.testnet")
    >>> async with httpx.AsyncClient(auth=auth) as client:
    ...     response = await client.get(f"{broker_url}/storagerequest/{request_id}")
"""

import logging
from typing import Any, Dict, Optional

import httpx

from didjws.issuer import TokenIssuer


logger = logging.getLogger(__name__)


class BearerTokenAuth(httpx.Auth):
    """
    httpx auth flow issuing one token per request.

    Tokens are short-lived and never cached, so retried or long-running
    clients always present a valid one. Only httpx.AsyncClient is supported
    because issuance awaits the signer.
    """

    def __init__(
        self,
        signer,
        account_id: str,
        network_id: str,
        audience: Optional[str] = None,
        issuer: Optional[TokenIssuer] = None,
        claims: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the auth flow.

        Args:
            signer: Signer capability holding the identity's key.
            account_id: Account to sign as.
            network_id: Network of the account.
            audience: Broker id placed in the 'aud' claim.
            issuer: TokenIssuer to use (default: a new one with env defaults).
            claims: Additional claims for every token.
        """
        self.signer = signer
        self.account_id = account_id
        self.network_id = network_id
        self.audience = audience
        self.issuer = issuer or TokenIssuer()
        self.claims = dict(claims or {})

    async def token(self) -> str:
        """Issue a token for the configured identity and audience."""
        claims = dict(self.claims)
        if self.audience is not None:
            claims["aud"] = self.audience
        return await self.issuer.issue(
            self.signer,
            {"accountId": self.account_id, "networkId": self.network_id, **claims},
        )

    def sync_auth_flow(self, request: httpx.Request):
        raise RuntimeError("BearerTokenAuth requires httpx.AsyncClient")

    async def async_auth_flow(self, request: httpx.Request):
        token = await self.token()
        request.headers["Authorization"] = f"Bearer {token}"
        logger.debug(f"Attached bearer token for {self.account_id} to {request.method} {request.url}")
        yield request
