"""
Statement Registry JSON-RPC Client

Issues single JSON-RPC 2.0 requests to one configured endpoint. Each call is
bounded by a timeout and wrapped in the retry policy from ``retry``; the
request/response contract is the same with or without retries.

Classes:
    ChainRpcClient: Sync and async JSON-RPC client

Example:
    >>> client = ChainRpcClient("https://rpc.testnet.arc.network")
    >>> client.get_block_number()
    1234567
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional

import httpx

from .chain_utils import parse_hex_quantity, to_hex_quantity
from .exceptions import RPCError, TimeoutError
from .retry import RetryConfig, DEFAULT_RETRY_CONFIG, retry, retry_async

logger = logging.getLogger("statement_registry.rpc")


class ChainRpcClient:
    """
    JSON-RPC client for ``eth_blockNumber`` and ``eth_getLogs``.

    Args:
        rpc_url: JSON-RPC endpoint
        timeout: Per-request timeout in seconds
        retry_config: Retry policy for transport failures
        transport: Optional httpx transport, used by tests
        async_transport: Optional httpx async transport, used by tests

    Raises (from every call):
        RPCError: Provider returned an error object or no result
        RetryExhaustedError: Transport kept failing after all attempts
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self._transport = transport
        self._async_transport = async_transport
        self._ids = itertools.count(1)

    # ============ Request plumbing ============

    def _build_payload(self, method: str, params: Optional[List[Any]]) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }

    def _unwrap(self, method: str, response: httpx.Response) -> Any:
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as exc:
            raise RPCError("Malformed JSON-RPC response", rpc_url=self.rpc_url, method=method) from exc

        if not isinstance(data, dict):
            raise RPCError("Malformed JSON-RPC response", rpc_url=self.rpc_url, method=method)

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise RPCError(
                    str(error.get("message") or "RPC error"),
                    rpc_url=self.rpc_url,
                    method=method,
                    rpc_code=error.get("code"),
                )
            raise RPCError(str(error), rpc_url=self.rpc_url, method=method)

        if "result" not in data:
            raise RPCError("JSON-RPC response has no result", rpc_url=self.rpc_url, method=method)
        return data["result"]

    def _post(self, method: str, payload: Dict[str, Any]) -> Any:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as exc:
            raise TimeoutError(method, self.timeout) from exc
        return self._unwrap(method, response)

    async def _post_async(self, method: str, payload: Dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._async_transport) as client:
                response = await client.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as exc:
            raise TimeoutError(method, self.timeout) from exc
        return self._unwrap(method, response)

    # ============ Generic call ============

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Send one JSON-RPC request and return its ``result``.

        Args:
            method: JSON-RPC method name
            params: Positional parameters
        """
        payload = self._build_payload(method, params)
        logger.debug("rpc call: method=%s id=%s", method, payload["id"])
        send = retry(config=self.retry_config, operation_name=method)(self._post)
        try:
            return send(method, payload)
        except httpx.HTTPStatusError as exc:
            raise self._status_error(method, exc) from exc

    async def call_async(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Async twin of ``call``."""
        payload = self._build_payload(method, params)
        logger.debug("rpc call (async): method=%s id=%s", method, payload["id"])
        send = retry_async(config=self.retry_config, operation_name=method)(self._post_async)
        try:
            return await send(method, payload)
        except httpx.HTTPStatusError as exc:
            raise self._status_error(method, exc) from exc

    def _status_error(self, method: str, exc: httpx.HTTPStatusError) -> RPCError:
        return RPCError(
            f"HTTP {exc.response.status_code} from RPC endpoint",
            rpc_url=self.rpc_url,
            method=method,
        )

    # ============ Typed helpers ============

    def get_block_number(self) -> int:
        return self._parse_block_number(self.call("eth_blockNumber"))

    async def get_block_number_async(self) -> int:
        return self._parse_block_number(await self.call_async("eth_blockNumber"))

    def get_logs(
        self,
        address: str,
        from_block: int,
        to_block: int,
        topics: List[Optional[str]],
    ) -> List[Dict[str, Any]]:
        """
        Query ``eth_getLogs``.

        Args:
            address: Emitting contract
            from_block: First block, inclusive
            to_block: Last block, inclusive
            topics: Positional topic filters (topic0 = event signature hash)

        Returns:
            Raw log dicts as returned by the node
        """
        result = self.call("eth_getLogs", [self._log_filter(address, from_block, to_block, topics)])
        return self._check_logs(result)

    async def get_logs_async(
        self,
        address: str,
        from_block: int,
        to_block: int,
        topics: List[Optional[str]],
    ) -> List[Dict[str, Any]]:
        result = await self.call_async(
            "eth_getLogs", [self._log_filter(address, from_block, to_block, topics)]
        )
        return self._check_logs(result)

    @staticmethod
    def _log_filter(address: str, from_block: int, to_block: int, topics: List[Optional[str]]) -> Dict[str, Any]:
        return {
            "address": address,
            "fromBlock": to_hex_quantity(from_block),
            "toBlock": to_hex_quantity(to_block),
            "topics": list(topics),
        }

    def _parse_block_number(self, result: Any) -> int:
        try:
            return parse_hex_quantity(result)
        except ValueError as exc:
            raise RPCError(
                f"Unexpected eth_blockNumber result: {result!r}",
                rpc_url=self.rpc_url,
                method="eth_blockNumber",
            ) from exc

    def _check_logs(self, result: Any) -> List[Dict[str, Any]]:
        if not isinstance(result, list):
            raise RPCError(
                "Unexpected eth_getLogs result", rpc_url=self.rpc_url, method="eth_getLogs"
            )
        return result
