"""
didjws Command Line Interface.

Provides commands for deriving a key's did:key, issuing bearer tokens and
showing the active configuration.
"""

import argparse
import asyncio
import json
import logging
import math
import sys
from typing import Any, Dict, List

from didjws import config
from didjws.did import did_from_public_key
from didjws.errors import TokenError
from didjws.issuer import TokenIssuer
from didjws.keystore import InMemoryKeyStore, KeyStoreSigner, load_private_key, public_key_bytes


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def parse_claims(pairs: List[str]) -> Dict[str, Any]:
    """
    Parse repeated 'name=value' arguments into claims.

    Values that are JSON numbers become numbers; everything else stays a string.
    """
    claims: Dict[str, Any] = {}
    for pair in pairs:
        name, sep, raw = pair.partition('=')
        if not sep or not name:
            raise ValueError(f"Claims must look like name=value, got '{pair}'")
        try:
            value = json.loads(raw)
        except ValueError:
            value = raw
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            value = raw
        elif isinstance(value, float) and not math.isfinite(value):
            value = raw
        claims[name] = value
    return claims


def cmd_did(args: argparse.Namespace) -> int:
    """Print the did:key of a private key."""
    private_key = args.key or config.PRIVATE_KEY

    if not private_key:
        print("Error: Missing private key. Set DIDJWS_PRIVATE_KEY or use --key", file=sys.stderr)
        return 1

    try:
        key = load_private_key(private_key)
        print(did_from_public_key(public_key_bytes(key)))
        return 0
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


async def _issue(args: argparse.Namespace, private_key: str, account_id: str, network_id: str) -> str:
    key_store = InMemoryKeyStore()
    await key_store.set_key(account_id, network_id, private_key)

    issuer = TokenIssuer(
        default_expiry_seconds=args.expiry,
        canonical_json=True if args.canonical else None,
        strict_claims=True if args.strict else None,
    )
    claims = parse_claims(args.claim or [])
    return await issuer.issue(
        KeyStoreSigner(key_store),
        {"accountId": account_id, "networkId": network_id, **claims},
    )


def cmd_issue(args: argparse.Namespace) -> int:
    """Issue a signed bearer token."""
    private_key = args.key or config.PRIVATE_KEY
    account_id = args.account or config.ACCOUNT_ID
    network_id = args.network or config.NETWORK_ID

    if not private_key:
        print("Error: Missing private key. Set DIDJWS_PRIVATE_KEY or use --key", file=sys.stderr)
        return 1

    if not account_id or not network_id:
        print(
            "Error: Missing identity. Set DIDJWS_ACCOUNT_ID/DIDJWS_NETWORK_ID or use --account/--network",
            file=sys.stderr,
        )
        return 1

    try:
        token = asyncio.run(_issue(args, private_key, account_id, network_id))
    except (ValueError, TokenError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.header:
        print(f"Authorization: Bearer {token}")
    else:
        print(token)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Show the active configuration."""
    config.print_config()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='didjws',
        description='didjws CLI - DID-bound bearer tokens for storage brokers'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # did command
    p_did = subparsers.add_parser('did', help='Print the did:key of a private key')
    p_did.add_argument('--key', help='Ed25519 private key (JWK JSON)')

    # issue command
    p_issue = subparsers.add_parser('issue', help='Issue a signed bearer token')
    p_issue.add_argument('--key', help='Ed25519 private key (JWK JSON)')
    p_issue.add_argument('--account', help='Account id to sign as')
    p_issue.add_argument('--network', help='Network id of the account')
    p_issue.add_argument('--claim', action='append', metavar='NAME=VALUE', help='Extra claim (repeatable)')
    p_issue.add_argument('--expiry', type=int, help='Validity window in seconds')
    p_issue.add_argument('--canonical', action='store_true', help='Emit sorted-key JSON segments')
    p_issue.add_argument('--strict', action='store_true', help='Reject overrides of registered claims')
    p_issue.add_argument('--header', action='store_true', help='Output as an Authorization header')

    # config command
    subparsers.add_parser('config', help='Show the active configuration')

    return parser


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == 'did':
        return cmd_did(args)
    elif args.command == 'issue':
        return cmd_issue(args)
    elif args.command == 'config':
        return cmd_config(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
