"""
did:key identifiers for Ed25519 public keys.

A did:key is the multicodec-tagged public key (0xed 0x01 prefix) encoded as
base58btc, with a leading 'z' multibase marker.
"""

import base58

# Ed25519 public key multicodec prefix (varint-encoded 0xed)
MULTICODEC_ED25519 = bytes([0xED, 0x01])
ED25519_KEY_LENGTH = 32
DID_KEY_PREFIX = "did:key:"
MULTIBASE_BASE58BTC = "z"


def multibase_from_public_key(public_key: bytes) -> str:
    """
    Encode a raw Ed25519 public key as a multibase string.

    Args:
        public_key: Raw 32-byte Ed25519 public key.

    Returns:
        The 'z'-prefixed base58btc encoding of the multicodec-tagged key.

    Raises:
        ValueError: If the key is not 32 bytes.
    """
    if len(public_key) != ED25519_KEY_LENGTH:
        raise ValueError(
            f"Ed25519 public key must be {ED25519_KEY_LENGTH} bytes, got {len(public_key)}"
        )
    multicodec_bytes = MULTICODEC_ED25519 + bytes(public_key)
    return MULTIBASE_BASE58BTC + base58.b58encode(multicodec_bytes).decode("ascii")


def did_from_public_key(public_key: bytes) -> str:
    """Construct a did:key from a raw 32-byte Ed25519 public key."""
    return DID_KEY_PREFIX + multibase_from_public_key(public_key)


def public_key_from_did(did: str) -> bytes:
    """
    Extract the raw Ed25519 public key from a did:key string.

    Raises:
        ValueError: If the DID is not an Ed25519 did:key.
    """
    prefix = DID_KEY_PREFIX + MULTIBASE_BASE58BTC
    if not did.startswith(prefix):
        raise ValueError(f"DID must start with '{prefix}', got '{did[:20]}'")
    try:
        decoded = base58.b58decode(did[len(prefix):])
    except ValueError as e:
        raise ValueError(f"Invalid base58btc encoding: {e}") from e

    expected = len(MULTICODEC_ED25519) + ED25519_KEY_LENGTH
    if len(decoded) != expected:
        raise ValueError(f"Decoded key must be {expected} bytes, got {len(decoded)}")
    if decoded[: len(MULTICODEC_ED25519)] != MULTICODEC_ED25519:
        raise ValueError(
            f"Invalid multicodec prefix: expected 0xed01, got 0x{decoded[:2].hex()}"
        )
    return decoded[len(MULTICODEC_ED25519):]


def validate_did(did: str) -> bool:
    """Check whether a string is a well-formed Ed25519 did:key."""
    try:
        public_key_from_did(did)
    except ValueError:
        return False
    return True
