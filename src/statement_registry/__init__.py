"""
ARC Statement Registry SDK

Python SDK for the onchain statement registry, supporting:
- Statement hashing, publishing and revoking (only hashes go on chain)
- Per-address activity timelines from StatementPublished / StatementRevoked logs
- Builder and onchain reputation scores from explorer transaction history

Quick Start:
    >>> from statement_registry import StatementRegistry
    >>> registry = StatementRegistry()
    >>> timeline = registry.fetch_timeline("0xd2d97209aFd34B9865fda1eA7B0c390395321B32")
"""

from .config import RegistryConfig
from .registry import AddressScores, RegistryStats, StatementRegistry, SubmittedStatement
from .rpc_client import ChainRpcClient
from .explorer import ExplorerClient, ExplorerResult, RawTransaction
from .events import EventKind, StatementEvent, decode_log, decode_logs
from .timeline import ActivityTimeline, ChainQueryWindow, LatestQueryGuard, QueryToken, reconcile
from .scoring import BuilderScore, OnchainScore, builder_score, onchain_score
from .wallet import WalletGateway, Web3WalletGateway, build_statement_transaction
from .hashing import digest, digest_hex, event_topic, function_selector, hash_statement
from .chain_utils import normalize_address, normalize_statement_hash
from .exceptions import (
    RegistryError,
    ConfigurationError,
    NetworkError,
    RPCError,
    TimeoutError,
    RetryExhaustedError,
    ExplorerFetchError,
    DataError,
    DecodeError,
    ValidationError,
    InvalidAddressError,
    InvalidHashError,
    InvalidStatementError,
    WalletError,
    WalletUnavailableError,
    WalletRejectedError,
)
from .retry import (
    RetryConfig,
    DEFAULT_RETRY_CONFIG,
    AGGRESSIVE_RETRY_CONFIG,
    CONSERVATIVE_RETRY_CONFIG,
    NO_RETRY_CONFIG,
    retry,
    retry_async,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "StatementRegistry",
    "RegistryConfig",
    "RegistryStats",
    "AddressScores",
    "SubmittedStatement",
    # Clients
    "ChainRpcClient",
    "ExplorerClient",
    "ExplorerResult",
    "RawTransaction",
    # Events and timeline
    "EventKind",
    "StatementEvent",
    "decode_log",
    "decode_logs",
    "ActivityTimeline",
    "ChainQueryWindow",
    "LatestQueryGuard",
    "QueryToken",
    "reconcile",
    # Scoring
    "BuilderScore",
    "OnchainScore",
    "builder_score",
    "onchain_score",
    # Wallet
    "WalletGateway",
    "Web3WalletGateway",
    "build_statement_transaction",
    # Hashing
    "digest",
    "digest_hex",
    "event_topic",
    "function_selector",
    "hash_statement",
    "normalize_address",
    "normalize_statement_hash",
    # Exceptions
    "RegistryError",
    "ConfigurationError",
    "NetworkError",
    "RPCError",
    "TimeoutError",
    "RetryExhaustedError",
    "ExplorerFetchError",
    "DataError",
    "DecodeError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidHashError",
    "InvalidStatementError",
    "WalletError",
    "WalletUnavailableError",
    "WalletRejectedError",
    # Retry
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "AGGRESSIVE_RETRY_CONFIG",
    "CONSERVATIVE_RETRY_CONFIG",
    "NO_RETRY_CONFIG",
    "retry",
    "retry_async",
]
