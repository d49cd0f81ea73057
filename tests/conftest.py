"""
Shared pytest fixtures for didjws tests.
"""

import pytest
import pytest_asyncio
from jwcrypto import jwk

from didjws import InMemoryKeyStore, KeyStoreSigner, PublicKey, TokenIssuer

ACCOUNT_ID = "account.testnet"
NETWORK_ID = "network.id"
AUDIENCE = "broker.testnet"
FIXED_NOW = 1700000000


class FixedSigner:
    """Signer returning a fixed key and a fixed signature, recording its calls."""

    def __init__(self, public_key: bytes, signature: bytes = b"\x07" * 64):
        self.public_key = public_key
        self.signature = signature
        self.calls = []

    async def get_public_key(self, account_id, network_id):
        self.calls.append(("get_public_key", account_id, network_id))
        return PublicKey(data=self.public_key)

    async def sign_message(self, message, account_id, network_id):
        self.calls.append(("sign_message", message, account_id, network_id))
        return self.signature


@pytest.fixture
def golden_public_key() -> bytes:
    """Public key bytes 0x01..0x20."""
    return bytes(range(1, 33))


@pytest.fixture
def fixed_signer(golden_public_key) -> FixedSigner:
    """Mock signer with fixed key and signature."""
    return FixedSigner(golden_public_key)


@pytest.fixture
def fixed_issuer() -> TokenIssuer:
    """Issuer whose clock is frozen at FIXED_NOW."""
    return TokenIssuer(
        default_expiry_seconds=600,
        canonical_json=False,
        strict_claims=False,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def private_key() -> jwk.JWK:
    """Fresh Ed25519 private key."""
    return jwk.JWK.generate(kty="OKP", crv="Ed25519")


@pytest.fixture
def key_store() -> InMemoryKeyStore:
    """Empty in-memory key store."""
    return InMemoryKeyStore()


@pytest_asyncio.fixture
async def keystore_signer(key_store, private_key) -> KeyStoreSigner:
    """Signer holding a key for ACCOUNT_ID on NETWORK_ID."""
    await key_store.set_key(ACCOUNT_ID, NETWORK_ID, private_key)
    return KeyStoreSigner(key_store)


@pytest.fixture
def token_options() -> dict:
    """Options naming the test identity and the broker audience."""
    return {"accountId": ACCOUNT_ID, "networkId": NETWORK_ID, "aud": AUDIENCE}
