"""
Statement Registry Explorer Client

Fetches an address's transaction history from an Etherscan-style explorer
API (``module=account&action=txlist``).

Classes:
    RawTransaction: The four transaction fields the scoring engine reads
    ExplorerResult: Tagged fetch result (ok + transactions, or error)
    ExplorerClient: HTTP client for the explorer API

Note:
    Explorer fetches are best-effort. ``fetch_transactions_result`` reports
    failures as a failed ``ExplorerResult`` instead of raising;
    ``fetch_transactions`` collapses a failure into an empty list, so an
    empty list from it means "no data or fetch failed".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

import httpx

from .chain_utils import normalize_address
from .exceptions import ExplorerFetchError

logger = logging.getLogger("statement_registry.explorer")


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class RawTransaction:
    """
    Transaction record from the explorer.

    Only ``to``, ``input``, ``gasUsed`` and ``timeStamp`` are interpreted;
    unparseable numbers become 0.
    """

    to: Optional[str] = None
    input: str = ""
    gas_used: int = 0
    timestamp: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawTransaction":
        return cls(
            to=data.get("to") or None,
            input=str(data.get("input") or ""),
            gas_used=_to_int(data.get("gasUsed")),
            timestamp=_to_int(data.get("timeStamp")),
        )


@dataclass(frozen=True)
class ExplorerResult:
    ok: bool
    transactions: List[RawTransaction] = field(default_factory=list)
    error: Optional[ExplorerFetchError] = None


class ExplorerClient:
    """
    Explorer API client.

    Args:
        api_url: Explorer API endpoint, e.g. https://testnet.arcscan.app/api
        timeout: HTTP timeout in seconds
        transport: Optional httpx transport, used by tests

    Example:
        >>> explorer = ExplorerClient("https://testnet.arcscan.app/api")
        >>> result = explorer.fetch_transactions_result("0xd2d9...")
        >>> if result.ok:
        ...     print(len(result.transactions))
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    def fetch_transactions_result(self, address: str) -> ExplorerResult:
        """
        Fetch the transaction list of ``address``.

        Raises:
            InvalidAddressError: address is malformed (checked before any request)
        """
        address = normalize_address(address)
        params = {
            "module": "account",
            "action": "txlist",
            "address": address,
            "startblock": 0,
            "endblock": 99999999,
            "sort": "desc",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.api_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            return self._failed(address, f"{type(exc).__name__}: {exc}")

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, list):
            # Etherscan-style APIs put the error text in "result" with status "0"
            return self._failed(address, str(result or "response has no result list"))

        transactions = [RawTransaction.from_dict(item) for item in result if isinstance(item, Mapping)]
        logger.debug("Fetched %d transactions for %s", len(transactions), address)
        return ExplorerResult(ok=True, transactions=transactions)

    def fetch_transactions(self, address: str) -> List[RawTransaction]:
        """Best-effort variant: empty list on any fetch failure."""
        return self.fetch_transactions_result(address).transactions

    @staticmethod
    def _failed(address: str, reason: str) -> ExplorerResult:
        logger.warning("Explorer fetch failed for %s: %s", address, reason)
        return ExplorerResult(ok=False, error=ExplorerFetchError(address, reason))
