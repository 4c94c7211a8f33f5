"""
Statement Registry Exceptions Module

Fine-grained exception types so callers can tell a rejected input from a
failed provider call or a declined wallet prompt.

Exception Hierarchy:
    RegistryError (Base Class)
    ├── ConfigurationError
    ├── NetworkError
    │   ├── RPCError
    │   ├── TimeoutError
    │   ├── RetryExhaustedError
    │   └── ExplorerFetchError
    ├── DataError
    │   └── DecodeError
    ├── ValidationError
    │   ├── InvalidAddressError
    │   ├── InvalidHashError
    │   └── InvalidStatementError
    └── WalletError
        ├── WalletUnavailableError
        └── WalletRejectedError

Example:
    >>> from statement_registry.exceptions import RPCError, InvalidAddressError
    >>> try:
    ...     registry.fetch_timeline("0xnot-an-address")
    ... except InvalidAddressError as e:
    ...     print(e.code)
    INVALID_ADDRESS

Note:
    - All exceptions inherit from RegistryError
    - Each exception has code and details attributes
"""

from typing import Optional, Any


class RegistryError(Exception):
    """
    Base exception for the statement registry SDK.

    Attributes:
        code: Error code string for programmatic handling
        details: Error details, can be any type
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.code = code or "REGISTRY_ERROR"
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {super().__str__()} - {self.details}"
        return f"[{self.code}] {super().__str__()}"


# ============ Configuration Exceptions ============


class ConfigurationError(RegistryError):
    """Raised when a configuration value is missing or malformed."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, "CONFIGURATION_ERROR", details)


# ============ Network Exceptions ============


class NetworkError(RegistryError):
    """
    Network Request Error Base Class.

    Raised when a request to the RPC node or the explorer fails in transit.
    Only transport failures, timeouts and HTTP 429/5xx are retried (see
    ``retry.RetryConfig``); an ``RPCError`` carrying a JSON-RPC error object
    is raised on the first attempt.
    """

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, "NETWORK_ERROR", details)


class RPCError(NetworkError):
    """
    JSON-RPC call failed.

    Raised when the provider answers with an ``error`` object or with a
    payload that carries no ``result``.

    Args:
        message: Provider error message
        rpc_url: RPC endpoint
        method: JSON-RPC method name
        rpc_code: Error code reported by the provider, if any

    Example:
        >>> raise RPCError("execution reverted", method="eth_getLogs", rpc_code=-32000)
    """

    def __init__(
        self,
        message: str,
        rpc_url: Optional[str] = None,
        method: Optional[str] = None,
        rpc_code: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            details={"rpc_url": rpc_url, "method": method, "rpc_code": rpc_code}
        )
        self.code = "RPC_ERROR"
        self.rpc_code = rpc_code


class TimeoutError(NetworkError):
    """
    Request Timeout Error.

    Args:
        operation: Operation name
        timeout_seconds: Timeout in seconds
    """

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Operation '{operation}' timed out after {timeout_seconds}s",
            details={"operation": operation, "timeout": timeout_seconds}
        )
        self.code = "TIMEOUT_ERROR"


class RetryExhaustedError(NetworkError):
    """
    Raised when an operation still fails after all retry attempts.

    Attributes:
        last_error: Exception from the last attempt

    Example:
        >>> try:
        ...     client.get_block_number()
        ... except RetryExhaustedError as e:
        ...     print(f"Failed after {e.details['attempts']} attempts: {e.last_error}")
    """

    def __init__(
        self,
        operation: str,
        attempts: int,
        last_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            f"Operation '{operation}' failed after {attempts} attempts",
            details={
                "operation": operation,
                "attempts": attempts,
                "last_error": str(last_error),
            }
        )
        self.code = "RETRY_EXHAUSTED"
        self.last_error = last_error


class ExplorerFetchError(NetworkError):
    """
    Explorer transaction list could not be fetched.

    Never raised out of ``ExplorerClient``; it is carried inside a failed
    ``ExplorerResult`` so callers can tell "no activity" from "fetch failed".

    Args:
        address: Address whose history was requested
        reason: Failure reason
    """

    def __init__(self, address: str, reason: Optional[str] = None) -> None:
        super().__init__(
            f"Failed to fetch transactions for {address}",
            details={"address": address, "reason": reason}
        )
        self.code = "EXPLORER_FETCH_FAILED"
        self.reason = reason


# ============ Data Exceptions ============


class DataError(RegistryError):
    """Raised when data received from the chain has an unexpected shape."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, "DATA_ERROR", details)


class DecodeError(DataError):
    """
    A single event log could not be decoded.

    Args:
        reason: What was wrong with the log
        transaction_hash: Transaction the log came from, if known

    Example:
        >>> raise DecodeError("expected 3 topics, got 1", transaction_hash="0xabc...")
    """

    def __init__(self, reason: str, transaction_hash: Optional[str] = None) -> None:
        super().__init__(
            f"Cannot decode log: {reason}",
            details={"transaction_hash": transaction_hash} if transaction_hash else None
        )
        self.code = "DECODE_ERROR"
        self.reason = reason


# ============ Validation Exceptions ============


class ValidationError(RegistryError):
    """
    User input failed validation.

    Raised before any network round-trip is made.
    """

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidAddressError(ValidationError):
    """
    Invalid Address Format Error.

    Example:
        >>> raise InvalidAddressError("0x1234")
    """

    def __init__(
        self,
        address: Optional[str],
        expected_format: str = "0x + 40 hex characters",
    ) -> None:
        super().__init__(
            f"Invalid address format: {address}",
            details={"address": address, "expected": expected_format}
        )
        self.code = "INVALID_ADDRESS"


class InvalidHashError(ValidationError):
    """
    Invalid statement hash.

    Args:
        value: Offending value (truncated in details)
        expected_length: Expected byte length
    """

    def __init__(self, value: Optional[str], expected_length: int = 32) -> None:
        value = str(value) if value else ""
        super().__init__(
            f"Invalid hash format, expected {expected_length} bytes (0x + {expected_length * 2} hex characters)",
            details={"value": value[:20] + "..." if len(value) > 20 else value}
        )
        self.code = "INVALID_HASH"


class InvalidStatementError(ValidationError):
    """Raised when the statement text to publish is empty."""

    def __init__(self, reason: str = "Statement text is empty") -> None:
        super().__init__(reason)
        self.code = "INVALID_STATEMENT"


# ============ Wallet Exceptions ============


class WalletError(RegistryError):
    """
    Wallet gateway error base class.

    Wallet errors end a single transaction attempt and are never retried.
    """

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, "WALLET_ERROR", details)


class WalletUnavailableError(WalletError):
    """Raised when no wallet or no connected account is available."""

    def __init__(self, reason: str = "No wallet account connected") -> None:
        super().__init__(reason)
        self.code = "WALLET_UNAVAILABLE"


class WalletRejectedError(WalletError):
    """
    Raised when the wallet owner declines the transaction.

    Args:
        reason: Message reported by the wallet
    """

    def __init__(self, reason: str = "User rejected the request") -> None:
        super().__init__(reason)
        self.code = "WALLET_REJECTED"
