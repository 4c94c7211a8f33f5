"""
Statement Registry SDK

Single entry point for the statement registry contract:
- activity timeline of an address (published + revoked events)
- registry-wide statistics
- publish / revoke transactions through a wallet gateway
- builder and onchain reputation scores from explorer history

Example:
    >>> from statement_registry import StatementRegistry
    >>> registry = StatementRegistry()
    >>> timeline = registry.fetch_timeline("0xd2d97209aFd34B9865fda1eA7B0c390395321B32")
    >>> for event in timeline:
    ...     print(event.kind.value, event.statement_hash)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .chain_utils import address_to_topic, explorer_tx_url, normalize_address, normalize_statement_hash
from .config import RegistryConfig
from .events import EventKind, StatementEvent, decode_logs
from .exceptions import InvalidStatementError, WalletUnavailableError
from .explorer import ExplorerClient, ExplorerResult
from .hashing import PUBLISH_SELECTOR, REVOKE_SELECTOR, hash_statement
from .rpc_client import ChainRpcClient
from .scoring import BuilderScore, OnchainScore, builder_score, onchain_score
from .timeline import ActivityTimeline, ChainQueryWindow, LatestQueryGuard, reconcile
from .wallet import WalletGateway, build_statement_transaction

logger = logging.getLogger("statement_registry.registry")


@dataclass(frozen=True)
class RegistryStats:
    """Registry-wide event counts within one query window."""

    published: int
    revoked: int
    window: ChainQueryWindow


@dataclass(frozen=True)
class AddressScores:
    """
    Both scores for one address.

    ``fetched`` is False when the explorer could not be reached, in which
    case the scores are the zero-activity values and must not be read as
    "no activity".
    """

    address: str
    builder: BuilderScore
    onchain: OnchainScore
    fetched: bool

    def as_dict(self) -> Dict[str, object]:
        return {
            "address": self.address,
            "fetched": self.fetched,
            "builder": self.builder.as_dict(),
            "onchain": self.onchain.as_dict(),
        }


@dataclass(frozen=True)
class SubmittedStatement:
    """A publish or revoke transaction handed to the wallet."""

    kind: EventKind
    statement_hash: str
    transaction_hash: str
    explorer_url: str


class StatementRegistry:
    """
    Statement registry client.

    Args:
        config: Registry configuration, defaults to ``RegistryConfig()``
        rpc_client: Custom JSON-RPC client (optional)
        explorer: Custom explorer client (optional)
        wallet: Wallet gateway, required only for publish/revoke

    Raises:
        ConfigurationError: Invalid configuration
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        rpc_client: Optional[ChainRpcClient] = None,
        explorer: Optional[ExplorerClient] = None,
        wallet: Optional[WalletGateway] = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self.rpc = rpc_client or ChainRpcClient(
            self.config.rpc_url,
            timeout=self.config.timeout,
            retry_config=self.config.retry_config,
        )
        self.explorer = explorer or ExplorerClient(
            self.config.explorer_api_url,
            timeout=self.config.timeout,
        )
        self.wallet = wallet

        logger.info(
            "Registry initialized: contract=%s, rpc=%s, lookback=%d",
            self.config.contract_address,
            self.config.rpc_url,
            self.config.lookback_blocks,
        )

    # ============ Log queries ============

    def _topics(self, kind: EventKind, author: Optional[str]) -> List[Optional[str]]:
        topics: List[Optional[str]] = [kind.topic]
        if author is not None:
            topics.append(address_to_topic(author))
        return topics

    def query_window(self) -> ChainQueryWindow:
        return ChainQueryWindow.from_current_block(
            self.rpc.get_block_number(), self.config.lookback_blocks
        )

    async def query_window_async(self) -> ChainQueryWindow:
        return ChainQueryWindow.from_current_block(
            await self.rpc.get_block_number_async(), self.config.lookback_blocks
        )

    def fetch_events(
        self,
        kind: EventKind,
        author: Optional[str] = None,
        window: Optional[ChainQueryWindow] = None,
    ) -> List[StatementEvent]:
        """
        Fetch and decode one event stream.

        Args:
            kind: Published or revoked
            author: Restrict to one author (validated before any request)
            window: Block range, defaults to the configured lookback
        """
        if author is not None:
            author = normalize_address(author)
        window = window or self.query_window()
        raw_logs = self.rpc.get_logs(
            self.config.contract_address,
            window.from_block,
            window.to_block,
            self._topics(kind, author),
        )
        return decode_logs(raw_logs, kind)

    async def fetch_events_async(
        self,
        kind: EventKind,
        author: Optional[str] = None,
        window: Optional[ChainQueryWindow] = None,
    ) -> List[StatementEvent]:
        if author is not None:
            author = normalize_address(author)
        window = window or await self.query_window_async()
        raw_logs = await self.rpc.get_logs_async(
            self.config.contract_address,
            window.from_block,
            window.to_block,
            self._topics(kind, author),
        )
        return decode_logs(raw_logs, kind)

    # ============ Timeline ============

    def fetch_timeline(self, address: str) -> ActivityTimeline:
        """
        Build the activity timeline of ``address``.

        Both streams share one window. If either query fails the whole
        timeline fails.

        Raises:
            InvalidAddressError: address is malformed (no request is made)
            RPCError / RetryExhaustedError: a log query failed
        """
        address = normalize_address(address)
        window = self.query_window()
        published = self.fetch_events(EventKind.PUBLISHED, address, window)
        revoked = self.fetch_events(EventKind.REVOKED, address, window)
        logger.debug(
            "Timeline for %s: %d published, %d revoked in blocks %d-%d",
            address, len(published), len(revoked), window.from_block, window.to_block,
        )
        return reconcile(published, revoked)

    async def fetch_timeline_async(self, address: str) -> ActivityTimeline:
        """Like ``fetch_timeline`` with both log queries in flight together."""
        address = normalize_address(address)
        window = await self.query_window_async()
        published, revoked = await asyncio.gather(
            self.fetch_events_async(EventKind.PUBLISHED, address, window),
            self.fetch_events_async(EventKind.REVOKED, address, window),
        )
        return reconcile(published, revoked)

    async def refresh_timeline(
        self,
        address: str,
        guard: LatestQueryGuard,
    ) -> Optional[ActivityTimeline]:
        """
        Fetch a timeline and publish it to ``guard`` unless it went stale.

        Returns:
            The timeline if it is still the latest query, else None
        """
        token = guard.begin(normalize_address(address))
        timeline = await self.fetch_timeline_async(token.address)
        if not guard.accept(token, timeline):
            logger.debug("Dropping stale timeline for %s (query %d)", token.address, token.sequence)
            return None
        return timeline

    def fetch_stats(self) -> RegistryStats:
        """Count all published and revoked events in the lookback window."""
        window = self.query_window()
        published = self.rpc.get_logs(
            self.config.contract_address, window.from_block, window.to_block,
            self._topics(EventKind.PUBLISHED, None),
        )
        revoked = self.rpc.get_logs(
            self.config.contract_address, window.from_block, window.to_block,
            self._topics(EventKind.REVOKED, None),
        )
        return RegistryStats(published=len(published), revoked=len(revoked), window=window)

    # ============ Transactions ============

    def _submit(self, kind: EventKind, selector: str, statement_hash: str) -> SubmittedStatement:
        if self.wallet is None:
            raise WalletUnavailableError("No wallet gateway configured")
        sender = self.wallet.get_account()
        if not sender:
            raise WalletUnavailableError()

        tx = build_statement_transaction(
            selector,
            statement_hash,
            self.config.contract_address,
            sender,
            self.config.gas_limit,
        )
        logger.debug("%s statement %s from %s", kind.value, statement_hash, sender)
        tx_hash = self.wallet.send_transaction(tx)
        return SubmittedStatement(
            kind=kind,
            statement_hash=statement_hash,
            transaction_hash=tx_hash,
            explorer_url=explorer_tx_url(self.config.explorer_url, tx_hash),
        )

    def publish_statement(self, text: str) -> SubmittedStatement:
        """
        Hash ``text`` and publish the hash. The text never leaves this process.

        Raises:
            InvalidStatementError: text is empty
            WalletUnavailableError / WalletRejectedError: from the wallet
        """
        if not text:
            raise InvalidStatementError()
        return self.publish_hash(hash_statement(text))

    def publish_hash(self, statement_hash: str) -> SubmittedStatement:
        statement_hash = normalize_statement_hash(statement_hash)
        return self._submit(EventKind.PUBLISHED, PUBLISH_SELECTOR, statement_hash)

    def revoke_statement(self, statement_hash: str) -> SubmittedStatement:
        """
        Revoke a previously published hash.

        Raises:
            InvalidHashError: hash is not 0x + 64 hex characters
        """
        statement_hash = normalize_statement_hash(statement_hash)
        return self._submit(EventKind.REVOKED, REVOKE_SELECTOR, statement_hash)

    # ============ Scores ============

    def fetch_scores(self, address: str) -> AddressScores:
        """Fetch explorer history for ``address`` and compute both scores."""
        address = normalize_address(address)
        result: ExplorerResult = self.explorer.fetch_transactions_result(address)
        return AddressScores(
            address=address,
            builder=builder_score(result.transactions),
            onchain=onchain_score(result.transactions),
            fetched=result.ok,
        )
