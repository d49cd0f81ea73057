# didjws/config.py
"""
Centralized configuration for didjws.

All configurable values are read from environment variables with sensible
defaults, so deployments can tune token issuance without code changes.
Explicit constructor or command line arguments always win.

Environment Variables:
    DIDJWS_DEFAULT_EXPIRY_SECONDS: Token validity window (default: 600)
    DIDJWS_CANONICAL_JSON: Emit sorted-key JSON segments (default: false)
    DIDJWS_STRICT_CLAIMS: Reject overrides of registered claims (default: false)
    DIDJWS_ACCOUNT_ID: Default account id for the CLI
    DIDJWS_NETWORK_ID: Default network id for the CLI
    DIDJWS_PRIVATE_KEY: Ed25519 private key (JWK JSON) for the CLI
"""

import os
from typing import Final, Optional


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Token Configuration
# =============================================================================

# Ten minutes, roughly 600 blocks on the target network
DEFAULT_EXPIRY_SECONDS: Final[int] = int(os.getenv("DIDJWS_DEFAULT_EXPIRY_SECONDS", "600"))

CANONICAL_JSON: Final[bool] = _env_flag("DIDJWS_CANONICAL_JSON")

STRICT_CLAIMS: Final[bool] = _env_flag("DIDJWS_STRICT_CLAIMS")

# =============================================================================
# Identity Configuration
# =============================================================================

ACCOUNT_ID: Final[Optional[str]] = os.getenv("DIDJWS_ACCOUNT_ID")

NETWORK_ID: Final[Optional[str]] = os.getenv("DIDJWS_NETWORK_ID")

PRIVATE_KEY: Final[Optional[str]] = os.getenv("DIDJWS_PRIVATE_KEY")


# =============================================================================
# Configuration Summary (for debugging)
# =============================================================================

def print_config() -> None:
    """Print current configuration (useful for debugging)."""
    print("didjws Configuration:")
    print(f"  DEFAULT_EXPIRY_SECONDS: {DEFAULT_EXPIRY_SECONDS}")
    print(f"  CANONICAL_JSON:         {CANONICAL_JSON}")
    print(f"  STRICT_CLAIMS:          {STRICT_CLAIMS}")
    print(f"  ACCOUNT_ID:             {ACCOUNT_ID or '-'}")
    print(f"  NETWORK_ID:             {NETWORK_ID or '-'}")
    print(f"  PRIVATE_KEY:            {'set' if PRIVATE_KEY else '-'}")


if __name__ == "__main__":
    print_config()
