"""
The signing capability consumed by the token issuer.

A signer resolves an identity, an (account_id, network_id) pair, to a public
key and signs arbitrary bytes on behalf of that identity. Any keypair backend
(software key store, hardware token, remote KMS) can sit behind it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyType(Enum):
    """Supported public key algorithms."""

    ED25519 = "ed25519"


@dataclass(frozen=True)
class PublicKey:
    """
    A raw public key and its algorithm tag.

    Attributes:
        data: Raw key bytes (32 bytes for Ed25519).
        key_type: Algorithm the key belongs to.
    """

    data: bytes
    key_type: KeyType = KeyType.ED25519


class SignerInterface(ABC):
    """Abstract interface for signing backends."""

    @abstractmethod
    async def get_public_key(
        self, account_id: Optional[str], network_id: Optional[str]
    ) -> Optional[PublicKey]:
        """Return the public key for an identity, or None if it is unknown."""
        pass

    @abstractmethod
    async def sign_message(
        self, message: bytes, account_id: Optional[str], network_id: Optional[str]
    ) -> bytes:
        """Sign message bytes for an identity. Returns the raw signature."""
        pass
