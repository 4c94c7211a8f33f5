"""
Statement event decoding.

Turns raw ``eth_getLogs`` entries emitted by the registry contract into
``StatementEvent`` records:

    StatementPublished(address indexed author, bytes32 indexed statementHash, uint256 timestamp)
    StatementRevoked(address indexed author, bytes32 indexed statementHash, uint256 timestamp)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

from .chain_utils import is_valid_statement_hash, parse_hex_quantity, topic_to_address
from .exceptions import DecodeError
from .hashing import STATEMENT_PUBLISHED_TOPIC, STATEMENT_REVOKED_TOPIC

logger = logging.getLogger("statement_registry.events")


class EventKind(str, enum.Enum):
    PUBLISHED = "published"
    REVOKED = "revoked"

    @property
    def topic(self) -> str:
        """topic0 that selects this event kind in a log filter."""
        if self is EventKind.PUBLISHED:
            return STATEMENT_PUBLISHED_TOPIC
        return STATEMENT_REVOKED_TOPIC


@dataclass(frozen=True)
class StatementEvent:
    """
    A published or revoked statement as observed on chain.

    ``statement_hash`` is the indexed topic value; the statement text itself
    is never on chain.
    """

    kind: EventKind
    author: str
    statement_hash: str
    timestamp: int
    block_number: int
    transaction_hash: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "author": self.author,
            "hash": self.statement_hash,
            "timestamp": self.timestamp,
            "blockNumber": self.block_number,
            "txHash": self.transaction_hash,
        }


def decode_log(raw_log: Mapping[str, Any], kind: EventKind) -> StatementEvent:
    """
    Decode one raw log into a ``StatementEvent``.

    Args:
        raw_log: Log entry as returned by ``eth_getLogs``
        kind: Kind of the query the log came from

    Raises:
        DecodeError: The log does not have the registry event layout
    """
    tx_hash = raw_log.get("transactionHash") if isinstance(raw_log, Mapping) else None
    try:
        topics = raw_log["topics"]
        if not isinstance(topics, list) or len(topics) < 3:
            raise DecodeError(
                f"expected 3 topics, got {len(topics) if isinstance(topics, list) else 0}",
                transaction_hash=tx_hash,
            )

        statement_hash = topics[2]
        if not is_valid_statement_hash(statement_hash):
            raise DecodeError("statement hash topic is not 32 bytes", transaction_hash=tx_hash)

        data = raw_log["data"]
        if not isinstance(data, str) or not data.startswith("0x") or len(data) < 66:
            raise DecodeError("data payload shorter than 32 bytes", transaction_hash=tx_hash)

        return StatementEvent(
            kind=kind,
            author=topic_to_address(topics[1]),
            statement_hash=statement_hash.lower(),
            timestamp=int(data[2:66], 16),
            block_number=parse_hex_quantity(raw_log["blockNumber"]),
            transaction_hash=str(raw_log["transactionHash"]),
        )
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(str(exc) or type(exc).__name__, transaction_hash=tx_hash) from exc


def decode_logs(raw_logs: Iterable[Mapping[str, Any]], kind: EventKind) -> List[StatementEvent]:
    """
    Decode a batch of logs, skipping the malformed ones.

    A bad entry is logged and dropped; the rest of the batch is still
    returned in its original order.
    """
    events = []
    for raw_log in raw_logs:
        try:
            events.append(decode_log(raw_log, kind))
        except DecodeError as e:
            logger.warning("Skipping %s log: %s", kind.value, e)
    return events
