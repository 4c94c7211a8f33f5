#!/usr/bin/env python3
"""
Statement Registry CLI Tool

Usage:
    statement-registry hash "I authored this"            # Hash a statement locally
    statement-registry stats                             # Registry-wide counts
    statement-registry timeline 0xAddress                # Activity of one author
    statement-registry score 0xAddress                   # Builder + onchain scores
    statement-registry publish "I authored this"         # Needs STATEMENT_REGISTRY_PRIVATE_KEY
    statement-registry revoke 0xStatementHash            # Needs STATEMENT_REGISTRY_PRIVATE_KEY

Configuration is read from STATEMENT_REGISTRY_* environment variables (and a
local .env file); see ``statement_registry.config``.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Optional

from .config import RegistryConfig
from .exceptions import RegistryError
from .hashing import hash_statement
from .registry import StatementRegistry
from .wallet import Web3WalletGateway

logger = logging.getLogger("statement_registry.cli")


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _build_registry(args: argparse.Namespace, with_wallet: bool = False) -> StatementRegistry:
    config = RegistryConfig.from_env(
        rpc_url=args.rpc_url,
        contract_address=args.contract,
        lookback_blocks=args.lookback,
    )
    wallet = None
    if with_wallet:
        wallet = Web3WalletGateway.from_rpc(
            config.rpc_url,
            private_key=os.getenv("STATEMENT_REGISTRY_PRIVATE_KEY"),
            chain_id=config.chain_id,
        )
    return StatementRegistry(config=config, wallet=wallet)


def cmd_hash(args: argparse.Namespace) -> int:
    _print({"hash": hash_statement(args.text)})
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    stats = _build_registry(args).fetch_stats()
    _print({
        "published": stats.published,
        "revoked": stats.revoked,
        "fromBlock": stats.window.from_block,
        "toBlock": stats.window.to_block,
    })
    return 0


def cmd_timeline(args: argparse.Namespace) -> int:
    timeline = _build_registry(args).fetch_timeline(args.address)
    _print([event.as_dict() for event in timeline])
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    scores = _build_registry(args).fetch_scores(args.address)
    if not scores.fetched:
        logger.warning("Explorer unavailable; scores reflect no data, not zero activity")
    _print(scores.as_dict())
    return 0


def _print_submitted(submitted) -> None:
    _print({
        "type": submitted.kind.value,
        "hash": submitted.statement_hash,
        "txHash": submitted.transaction_hash,
        "explorer": submitted.explorer_url,
    })


def cmd_publish(args: argparse.Namespace) -> int:
    _print_submitted(_build_registry(args, with_wallet=True).publish_statement(args.text))
    return 0


def cmd_revoke(args: argparse.Namespace) -> int:
    _print_submitted(_build_registry(args, with_wallet=True).revoke_statement(args.hash))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statement-registry",
        description="Read and write statements on the ARC statement registry",
    )
    parser.add_argument("--rpc-url", help="JSON-RPC endpoint")
    parser.add_argument("--contract", help="Registry contract address")
    parser.add_argument("--lookback", type=int, help="Blocks to scan back from the chain head")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    hash_parser = subparsers.add_parser("hash", help="Hash a statement without sending it")
    hash_parser.add_argument("text", help="Statement text")
    hash_parser.set_defaults(func=cmd_hash)

    stats_parser = subparsers.add_parser("stats", help="Count published and revoked statements")
    stats_parser.set_defaults(func=cmd_stats)

    timeline_parser = subparsers.add_parser("timeline", help="Show an address's activity")
    timeline_parser.add_argument("address", help="Author address")
    timeline_parser.set_defaults(func=cmd_timeline)

    score_parser = subparsers.add_parser("score", help="Compute builder and onchain scores")
    score_parser.add_argument("address", help="Address to score")
    score_parser.set_defaults(func=cmd_score)

    publish_parser = subparsers.add_parser("publish", help="Publish a statement hash")
    publish_parser.add_argument("text", help="Statement text (only its hash is sent)")
    publish_parser.set_defaults(func=cmd_publish)

    revoke_parser = subparsers.add_parser("revoke", help="Revoke a published statement hash")
    revoke_parser.add_argument("hash", help="Statement hash, 0x + 64 hex characters")
    revoke_parser.set_defaults(func=cmd_revoke)

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except RegistryError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
