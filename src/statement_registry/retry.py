"""
Statement Registry Retry Module

Bounded retry with exponential backoff for calls to third-party RPC nodes.

Classes:
    RetryConfig: Retry configuration data class

Functions:
    calculate_delay: Delay before the Nth attempt
    is_retryable: Decide whether an exception is worth another attempt
    retry: Synchronous retry decorator
    retry_async: Asynchronous retry decorator

Predefined Configs:
    DEFAULT_RETRY_CONFIG: 3 attempts, 1s base delay
    AGGRESSIVE_RETRY_CONFIG: 5 attempts, 0.5s base delay
    CONSERVATIVE_RETRY_CONFIG: 2 attempts, 2s base delay
    NO_RETRY_CONFIG: single attempt

Example:
    >>> from statement_registry.retry import retry, AGGRESSIVE_RETRY_CONFIG
    >>> @retry(config=AGGRESSIVE_RETRY_CONFIG, operation_name="eth_blockNumber")
    ... def block_number():
    ...     ...

Note:
    - Only transport failures, timeouts and retryable HTTP statuses are retried.
      A JSON-RPC ``error`` object (``RPCError``) is an answer, not a transport
      failure, and is raised on the first attempt.
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Callable, Optional, Tuple, Type, TypeVar

import httpx

from .exceptions import RetryExhaustedError, TimeoutError

logger = logging.getLogger("statement_registry.retry")

T = TypeVar("T")


@dataclass
class RetryConfig:
    """
    Retry configuration.

    Attributes:
        max_attempts: Maximum number of attempts, first attempt included
        base_delay: Delay before the first retry (seconds)
        max_delay: Upper bound for any single delay (seconds)
        exponential_base: Backoff multiplier
        jitter: Whether to add random jitter
        jitter_factor: Jitter range as a fraction of the delay
        retryable_exceptions: Exception types that trigger a retry
        retry_on_status_codes: HTTP statuses that trigger a retry

    Note:
        - Delay formula: base_delay * (exponential_base ^ (attempt - 2))
        - Jitter range: delay ± (delay * jitter_factor)
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    jitter_factor: float = 0.1
    retryable_exceptions: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (
            TimeoutError,
            httpx.TransportError,
            ConnectionError,
        )
    )
    retry_on_status_codes: Tuple[int, ...] = (429, 500, 502, 503, 504)


# ============ Predefined Configs ============

DEFAULT_RETRY_CONFIG = RetryConfig()

AGGRESSIVE_RETRY_CONFIG = RetryConfig(
    max_attempts=5,
    base_delay=0.5,
    max_delay=60.0,
    exponential_base=2.0,
)

CONSERVATIVE_RETRY_CONFIG = RetryConfig(
    max_attempts=2,
    base_delay=2.0,
    max_delay=10.0,
    exponential_base=1.5,
)

NO_RETRY_CONFIG = RetryConfig(max_attempts=1)


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate the delay to wait before ``attempt``.

    Args:
        attempt: Attempt number, starting from 1
        config: Retry configuration

    Returns:
        Delay in seconds, 0 for the first attempt

    Example:
        >>> config = RetryConfig(base_delay=1.0, exponential_base=2.0, jitter=False)
        >>> calculate_delay(1, config), calculate_delay(2, config), calculate_delay(3, config)
        (0.0, 1.0, 2.0)
    """
    if attempt <= 1:
        return 0.0

    delay = config.base_delay * (config.exponential_base ** (attempt - 2))
    delay = min(delay, config.max_delay)

    if config.jitter:
        jitter_range = delay * config.jitter_factor
        delay += random.uniform(-jitter_range, jitter_range)

    return max(0.0, delay)


def is_retryable(exception: Exception, config: RetryConfig) -> bool:
    """
    Decide whether ``exception`` should trigger another attempt.

    HTTP status errors are judged by their status code, everything else by
    its type.

    Example:
        >>> is_retryable(httpx.ConnectError("refused"), DEFAULT_RETRY_CONFIG)
        True
        >>> is_retryable(ValueError("invalid"), DEFAULT_RETRY_CONFIG)
        False
    """
    if isinstance(exception, config.retryable_exceptions):
        return True

    response = getattr(exception, "response", None)
    if response is not None and hasattr(response, "status_code"):
        return response.status_code in config.retry_on_status_codes

    return False


def retry(
    config: Optional[RetryConfig] = None,
    operation_name: Optional[str] = None,
) -> Callable:
    """
    Synchronous retry decorator.

    Args:
        config: Retry configuration, defaults to DEFAULT_RETRY_CONFIG
        operation_name: Name used in logs and in RetryExhaustedError

    Raises:
        RetryExhaustedError: Every attempt failed with a retryable error
        Exception: Non-retryable errors are raised unchanged
    """
    if config is None:
        config = DEFAULT_RETRY_CONFIG

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        op_name = operation_name or func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            last_exception: Optional[Exception] = None

            for attempt in range(1, config.max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    last_exception = e

                    if not is_retryable(e, config):
                        logger.debug(
                            "Non-retryable exception in %s: %s",
                            op_name,
                            type(e).__name__,
                        )
                        raise

                    if attempt >= config.max_attempts:
                        logger.warning(
                            "Retry exhausted for %s after %d attempts: %s",
                            op_name,
                            attempt,
                            str(e),
                        )
                        raise RetryExhaustedError(op_name, attempt, e) from e

                    delay = calculate_delay(attempt + 1, config)
                    logger.info(
                        "Retrying %s (attempt %d/%d) after %.2fs: %s",
                        op_name,
                        attempt,
                        config.max_attempts,
                        delay,
                        str(e),
                    )
                    time.sleep(delay)

            raise RetryExhaustedError(op_name, config.max_attempts, last_exception)

        return wrapper

    return decorator


def retry_async(
    config: Optional[RetryConfig] = None,
    operation_name: Optional[str] = None,
) -> Callable:
    """Same as ``retry`` for coroutine functions; waits with ``asyncio.sleep``."""
    if config is None:
        config = DEFAULT_RETRY_CONFIG

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        op_name = operation_name or func.__name__

        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            last_exception: Optional[Exception] = None

            for attempt in range(1, config.max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    last_exception = e

                    if not is_retryable(e, config):
                        raise

                    if attempt >= config.max_attempts:
                        logger.warning(
                            "Retry exhausted for %s after %d attempts: %s",
                            op_name,
                            attempt,
                            str(e),
                        )
                        raise RetryExhaustedError(op_name, attempt, e) from e

                    delay = calculate_delay(attempt + 1, config)
                    logger.info(
                        "Retrying %s (attempt %d/%d) after %.2fs",
                        op_name,
                        attempt,
                        config.max_attempts,
                        delay,
                    )
                    await asyncio.sleep(delay)

            raise RetryExhaustedError(op_name, config.max_attempts, last_exception)

        return wrapper

    return decorator
