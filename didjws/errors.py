"""
didjws exception hierarchy.

Every failure raised while issuing a token derives from TokenError, so callers
can catch the whole family or a single, inspectable failure kind.
"""

from typing import Optional


class TokenError(Exception):
    """Base exception for token issuance errors."""

    pass


class IdentityResolutionError(TokenError):
    """Raised when the signer cannot produce a public key for an identity."""

    def __init__(
        self,
        message: str,
        account_id: Optional[str] = None,
        network_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.account_id = account_id
        self.network_id = network_id


# Shorter name used by the issuer contract.
IdentityError = IdentityResolutionError


class SigningError(TokenError):
    """Raised when the signer rejects or fails while signing a message."""

    def __init__(
        self,
        message: str,
        account_id: Optional[str] = None,
        network_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.account_id = account_id
        self.network_id = network_id


class EncodingError(TokenError):
    """Raised when a header or claim cannot be serialized to JSON."""

    pass


class ClaimOverrideError(EncodingError):
    """Raised in strict mode when extra claims overwrite a registered claim."""

    def __init__(self, claims):
        self.claims = sorted(claims)
        super().__init__(f"Refusing to override registered claims: {', '.join(self.claims)}")
