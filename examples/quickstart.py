#!/usr/bin/env python3
"""
Statement Registry quick start

Optional environment variables:
    export STATEMENT_REGISTRY_RPC_URL="https://rpc.testnet.arc.network"
    export STATEMENT_REGISTRY_PRIVATE_KEY="0x..."   # only needed to publish

Run:
    python examples/quickstart.py 0xYourAddress
"""

import os
import sys

from statement_registry import RegistryConfig, StatementRegistry, Web3WalletGateway, hash_statement
from statement_registry.exceptions import RegistryError, WalletRejectedError


def main():
    address = sys.argv[1] if len(sys.argv) > 1 else "0xd2d97209aFd34B9865fda1eA7B0c390395321B32"

    # 1. Set up the registry
    print("🚀 Initializing registry...")
    config = RegistryConfig.from_env()
    private_key = os.getenv("STATEMENT_REGISTRY_PRIVATE_KEY")
    wallet = None
    if private_key:
        wallet = Web3WalletGateway.from_rpc(config.rpc_url, private_key=private_key, chain_id=config.chain_id)
    registry = StatementRegistry(config=config, wallet=wallet)
    print(f"   ✓ Contract: {config.contract_address}")

    # 2. Hash a statement (no chain interaction)
    statement = "I wrote the quick start example."
    print(f"\n📝 Statement hash: {hash_statement(statement)}")

    # 3. Registry-wide counts
    stats = registry.fetch_stats()
    print(f"\n📊 Last {config.lookback_blocks} blocks: {stats.published} published, {stats.revoked} revoked")

    # 4. Activity of one address
    print(f"\n🕒 Activity of {address}:")
    for event in registry.fetch_timeline(address):
        print(f"   {event.kind.value:<9} {event.statement_hash} at {event.timestamp}")

    # 5. Reputation scores
    scores = registry.fetch_scores(address)
    if not scores.fetched:
        print("\n⚠️  Explorer unavailable, scores below reflect no data")
    print(f"\n🏗️  Builder score: {scores.builder.score}  (deployments={scores.builder.deployments})")
    print(f"⛓️  Onchain score: {scores.onchain.score}  (txCount={scores.onchain.tx_count})")

    # 6. Publish (needs a funded key)
    if wallet is not None:
        try:
            submitted = registry.publish_statement(statement)
            print(f"\n✅ Published: {submitted.explorer_url}")
        except WalletRejectedError:
            print("\n❌ Transaction rejected")
        except RegistryError as e:
            print(f"\n❌ Registry error: {e}")
    else:
        print("\n⚠️  Skipping publish (STATEMENT_REGISTRY_PRIVATE_KEY not set)")


if __name__ == "__main__":
    main()
