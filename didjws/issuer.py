"""
didjws Issuer - Builds signed, DID-bound bearer tokens.

A token is three base64url segments joined by dots: a header embedding the
signer's Ed25519 public key as a JWK, a payload whose subject is the did:key
derived from that key, and the signature over the first two segments.
"""

import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from didjws import config
from didjws.did import did_from_public_key
from didjws.encoding import b64url_encode, check_claim_value, encode_segment, normalize_claim_value
from didjws.errors import (
    ClaimOverrideError,
    IdentityResolutionError,
    SigningError,
)
from didjws.signer import KeyType, PublicKey


logger = logging.getLogger(__name__)

# Non-standard alg label expected by relying brokers; not a registered JOSE name.
ALGORITHM = "EdDSASha256"
TOKEN_TYPE = "JWT"

# Claims computed by the issuer that extra claims may overwrite.
REGISTERED_CLAIMS = frozenset({"iss", "sub", "nbf", "iat", "exp"})

_ACCOUNT_KEYS = ("accountId", "account_id")
_NETWORK_KEYS = ("networkId", "network_id")


@dataclass
class TokenOptions:
    """
    Identity and extra claims for one token.

    Attributes:
        account_id: Account of the identity to sign as (also the issuer claim).
        network_id: Network used to look up the identity's keys.
        claims: Additional payload claims, e.g. {"aud": "broker.testnet"}.
    """

    account_id: Optional[str] = None
    network_id: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "TokenOptions":
        """Split accountId/networkId out of a flat options mapping."""
        claims = dict(options)
        account_id = _pop_first(claims, _ACCOUNT_KEYS)
        network_id = _pop_first(claims, _NETWORK_KEYS)
        return cls(account_id=account_id, network_id=network_id, claims=claims)


def _pop_first(claims: Dict[str, Any], names) -> Optional[Any]:
    value = None
    for name in names:
        popped = claims.pop(name, None)
        if value is None:
            value = popped
    return value


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def build_jwk(public_key: PublicKey) -> Dict[str, str]:
    """Build the public JWK embedded in the token header (RFC 7515 §4.1.3)."""
    return {
        "kty": "OKP",
        "crv": "Ed25519",
        "x": b64url_encode(public_key.data),
        "use": "sig",
    }


def build_header(public_key: PublicKey) -> Dict[str, Any]:
    """Build the token header for a public key."""
    return {"alg": ALGORITHM, "typ": TOKEN_TYPE, "jwk": build_jwk(public_key)}


class TokenIssuer:
    """
    Issues signed bearer tokens through a signer capability.

    The issuer holds no per-call state; one instance can serve concurrent
    issue() calls for different identities.

    Example:
        >>> issuer = TokenIssuer()
        >>> token = await issuer.issue(
        ...     signer, {"accountId": "account.testnet", "networkId": "testnet", "aud": "broker.testnet"}
        ... )
    """

    def __init__(
        self,
        default_expiry_seconds: Optional[int] = None,
        canonical_json: Optional[bool] = None,
        strict_claims: Optional[bool] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the issuer.

        Args:
            default_expiry_seconds: Token validity window (default: 10 minutes).
            canonical_json: Emit sorted-key JSON instead of construction order.
            strict_claims: Reject extra claims that overwrite registered claims.
            clock: Returns the current Unix time in seconds.
        """
        self.default_expiry_seconds = (
            config.DEFAULT_EXPIRY_SECONDS if default_expiry_seconds is None else default_expiry_seconds
        )
        self.canonical_json = config.CANONICAL_JSON if canonical_json is None else canonical_json
        self.strict_claims = config.STRICT_CLAIMS if strict_claims is None else strict_claims
        self._clock = clock

    async def issue(
        self,
        signer,
        options: Union[TokenOptions, Mapping[str, Any], None] = None,
        /,
        expiry_seconds: Optional[int] = None,
        **claims: Any,
    ) -> str:
        """
        Create a signed token for the identity named in options.

        Args:
            signer: Any object with get_public_key() and sign_message(); the
                    methods may be coroutines or plain functions.
            options: TokenOptions, or a flat mapping holding accountId,
                     networkId and extra claims.
            expiry_seconds: Override of the validity window for this token.
            **claims: Extra claims, merged over those in options. A claim named
                      expiry_seconds has to be passed in the options mapping.

        Returns:
            The compact token string.

        Raises:
            IdentityResolutionError: If no usable public key is found.
            SigningError: If signing fails.
            EncodingError: If a claim cannot be serialized.
        """
        opts = self._coerce_options(options, claims)
        account_id, network_id = opts.account_id, opts.network_id
        extras = self._check_claims(opts.claims)

        public_key = await self._resolve_public_key(signer, account_id, network_id)
        header = build_header(public_key)

        now = int(self._clock())
        window = self.default_expiry_seconds if expiry_seconds is None else expiry_seconds
        did = did_from_public_key(public_key.data)

        payload: Dict[str, Any] = {
            "iss": account_id,  # principal that issued the token
            "sub": did,  # subject, the key holder
            "nbf": now,
            "iat": now,
            "exp": now + window,
        }
        payload.update(extras)
        payload = {name: value for name, value in payload.items() if value is not None}

        encoded_header = encode_segment(header, sort_keys=self.canonical_json)
        encoded_payload = encode_segment(payload, sort_keys=self.canonical_json)
        message = f"{encoded_header}.{encoded_payload}".encode("utf-8")

        signature = await self._sign(signer, message, account_id, network_id)
        logger.debug(f"Issued token for {account_id} on {network_id} as {did}")
        return f"{encoded_header}.{encoded_payload}.{b64url_encode(signature)}"

    @staticmethod
    def _coerce_options(options, claims: Dict[str, Any]) -> TokenOptions:
        if options is None:
            options = {}
        if isinstance(options, TokenOptions):
            merged = TokenOptions.from_mapping(claims)
            return TokenOptions(
                account_id=options.account_id if merged.account_id is None else merged.account_id,
                network_id=options.network_id if merged.network_id is None else merged.network_id,
                claims={**options.claims, **merged.claims},
            )
        if not isinstance(options, Mapping):
            raise TypeError(f"options must be TokenOptions or a mapping, got {type(options).__name__}")
        return TokenOptions.from_mapping({**options, **claims})

    def _check_claims(self, claims: Dict[str, Any]) -> Dict[str, Any]:
        for name, value in claims.items():
            check_claim_value(name, value)

        overridden = REGISTERED_CLAIMS.intersection(claims)
        if overridden:
            if self.strict_claims:
                raise ClaimOverrideError(overridden)
            logger.warning(f"Extra claims override registered claims: {', '.join(sorted(overridden))}")
        return {name: normalize_claim_value(value) for name, value in claims.items()}

    @staticmethod
    async def _resolve_public_key(signer, account_id, network_id) -> PublicKey:
        try:
            public_key = await _maybe_await(signer.get_public_key(account_id, network_id))
        except Exception as e:
            raise IdentityResolutionError(
                f"Could not resolve public key for {account_id} on {network_id}: {e}",
                account_id=account_id,
                network_id=network_id,
            ) from e

        if public_key is None:
            raise IdentityResolutionError(
                f"No public key for {account_id} on {network_id}",
                account_id=account_id,
                network_id=network_id,
            )
        if isinstance(public_key, (bytes, bytearray)):
            public_key = PublicKey(data=bytes(public_key))
        if not isinstance(public_key, PublicKey):
            raise IdentityResolutionError(
                f"Signer returned {type(public_key).__name__}, expected a public key",
                account_id=account_id,
                network_id=network_id,
            )
        if public_key.key_type is not KeyType.ED25519:
            raise IdentityResolutionError(
                f"Unsupported key type {public_key.key_type.value} for {account_id}",
                account_id=account_id,
                network_id=network_id,
            )
        try:
            did_from_public_key(public_key.data)
        except ValueError as e:
            raise IdentityResolutionError(
                f"Invalid public key for {account_id}: {e}",
                account_id=account_id,
                network_id=network_id,
            ) from e
        return public_key

    @staticmethod
    async def _sign(signer, message: bytes, account_id, network_id) -> bytes:
        try:
            signature = await _maybe_await(signer.sign_message(message, account_id, network_id))
        except Exception as e:
            raise SigningError(
                f"Signing failed for {account_id} on {network_id}: {e}",
                account_id=account_id,
                network_id=network_id,
            ) from e

        if not isinstance(signature, (bytes, bytearray, memoryview)):
            raise SigningError(
                f"Signer returned {type(signature).__name__}, expected bytes",
                account_id=account_id,
                network_id=network_id,
            )
        return bytes(signature)


async def issue(
    signer,
    options: Union[TokenOptions, Mapping[str, Any], None] = None,
    /,
    **claims: Any,
) -> str:
    """
    Create a signed token with a default TokenIssuer.

    See TokenIssuer.issue for arguments and errors.
    """
    return await TokenIssuer().issue(signer, options, **claims)
