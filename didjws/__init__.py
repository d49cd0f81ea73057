"""
didjws - DID-bound bearer tokens signed through a pluggable signer.

Issues compact, JWS-style tokens proving control of an Ed25519 keypair to a
remote storage broker. The token subject is the did:key derived from the key.
"""

__version__ = "0.3.0"

# Core issuance
from .issuer import TokenIssuer, TokenOptions, issue
from .errors import (
    TokenError,
    IdentityResolutionError,
    IdentityError,
    SigningError,
    EncodingError,
    ClaimOverrideError,
)

# Keys and identifiers
from .signer import SignerInterface, PublicKey, KeyType
from .did import did_from_public_key, public_key_from_did, validate_did
from .keystore import InMemoryKeyStore, KeyStoreInterface, KeyStoreSigner, KeyNotFoundError


# HTTP integration (lazy import to keep httpx off the import path)
def __getattr__(name):
    """Lazy loading of the HTTP auth flow."""
    if name == "BearerTokenAuth":
        from .auth import BearerTokenAuth

        return BearerTokenAuth
    raise AttributeError(f"module 'didjws' has no attribute '{name}'")


__all__ = [
    "__version__",
    # Core
    "TokenIssuer",
    "TokenOptions",
    "issue",
    # Errors
    "TokenError",
    "IdentityResolutionError",
    "IdentityError",
    "SigningError",
    "EncodingError",
    "ClaimOverrideError",
    # Keys
    "SignerInterface",
    "PublicKey",
    "KeyType",
    "did_from_public_key",
    "public_key_from_did",
    "validate_did",
    "InMemoryKeyStore",
    "KeyStoreInterface",
    "KeyStoreSigner",
    "KeyNotFoundError",
    # HTTP (lazy loaded)
    "BearerTokenAuth",
]
