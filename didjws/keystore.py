"""
Software keypair backend for the signer capability.

Holds Ed25519 private keys (as JWKs) per identity and signs on their behalf.
Keys are supplied by the caller; this module never generates or persists them.

Example:
    >>> store = InMemoryKeyStore()
    >>> await store.set_key("account.testnet", "testnet", private_key_jwk)
    >>> signer = KeyStoreSigner(store)
    >>> token = await issue(signer, {"accountId": "account.testnet", "networkId": "testnet"})
"""

import asyncio
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, Union

from cryptography.hazmat.primitives import serialization
from jwcrypto import jwk

from didjws.signer import KeyType, PublicKey, SignerInterface


logger = logging.getLogger(__name__)


class KeyNotFoundError(LookupError):
    """Raised when no key is stored for an identity."""

    pass


def load_private_key(private_key: Union[str, jwk.JWK]) -> jwk.JWK:
    """
    Load and validate an Ed25519 private key.

    Args:
        private_key: JWK JSON string or jwcrypto JWK object.

    Returns:
        The validated JWK.

    Raises:
        ValueError: If the key is malformed, not Ed25519, or has no private part.
    """
    if isinstance(private_key, jwk.JWK):
        key = private_key
    else:
        if not private_key:
            raise ValueError("A private key (JWK JSON string) is required")
        try:
            key = jwk.JWK.from_json(private_key)
        except Exception as e:
            raise ValueError(f"Invalid JWK private key: {e}") from e

    if key.get("kty") != "OKP" or key.get("crv") != "Ed25519":
        raise ValueError("Key must be an Ed25519 key (OKP with crv=Ed25519)")
    if not key.has_private:
        raise ValueError("Key must include the private component")
    return key


def public_key_bytes(key: jwk.JWK) -> bytes:
    """Return the raw 32-byte public key of an Ed25519 JWK."""
    return key.get_op_key("verify").public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


class KeyStoreInterface(ABC):
    """Abstract interface for per-identity key storage."""

    @abstractmethod
    async def get_key(self, account_id: str, network_id: str) -> Optional[jwk.JWK]:
        """Get the key for an identity. Returns None if not stored."""
        pass

    @abstractmethod
    async def set_key(
        self, account_id: str, network_id: str, private_key: Union[str, jwk.JWK]
    ) -> None:
        """Store a key for an identity, replacing any previous one."""
        pass


class InMemoryKeyStore(KeyStoreInterface):
    """
    In-memory key store keyed by (network_id, account_id).

    Suitable for tests, scripts and short-lived processes.
    """

    def __init__(self):
        self._keys: Dict[Tuple[str, str], jwk.JWK] = {}
        self._lock = asyncio.Lock()

    async def get_key(self, account_id: str, network_id: str) -> Optional[jwk.JWK]:
        async with self._lock:
            return self._keys.get((network_id, account_id))

    async def set_key(
        self, account_id: str, network_id: str, private_key: Union[str, jwk.JWK]
    ) -> None:
        key = load_private_key(private_key)
        async with self._lock:
            self._keys[(network_id, account_id)] = key
        logger.debug(f"Stored key for {account_id} on {network_id}")


class KeyStoreSigner(SignerInterface):
    """
    Signer backed by a key store.

    Messages are hashed with SHA-256 and the digest is signed with Ed25519,
    which is what the EdDSASha256 header label announces to relying parties.
    Unknown identities resolve to no public key; signing for them raises
    KeyNotFoundError.
    """

    def __init__(self, key_store: KeyStoreInterface):
        self.key_store = key_store

    async def get_public_key(
        self, account_id: Optional[str], network_id: Optional[str]
    ) -> Optional[PublicKey]:
        if account_id is None or network_id is None:
            return None
        key = await self.key_store.get_key(account_id, network_id)
        if key is None:
            return None
        return PublicKey(data=public_key_bytes(key), key_type=KeyType.ED25519)

    async def sign_message(
        self, message: bytes, account_id: Optional[str], network_id: Optional[str]
    ) -> bytes:
        key = None
        if account_id is not None and network_id is not None:
            key = await self.key_store.get_key(account_id, network_id)
        if key is None:
            raise KeyNotFoundError(f"No key for {account_id} on {network_id}")
        digest = hashlib.sha256(bytes(message)).digest()
        return key.get_op_key("sign").sign(digest)
