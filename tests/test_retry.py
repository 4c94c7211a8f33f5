"""Retry policy tests."""

import asyncio

import httpx
import pytest
from statement_registry.retry import (
    RetryConfig,
    DEFAULT_RETRY_CONFIG,
    AGGRESSIVE_RETRY_CONFIG,
    CONSERVATIVE_RETRY_CONFIG,
    NO_RETRY_CONFIG,
    calculate_delay,
    is_retryable,
    retry,
    retry_async,
)
from statement_registry.exceptions import (
    RPCError,
    RetryExhaustedError,
    TimeoutError,
    InvalidAddressError,
)

FAST = RetryConfig(max_attempts=3, base_delay=0.01, jitter=False)


class TestRetryConfig:
    def test_default_config(self):
        config = DEFAULT_RETRY_CONFIG
        assert config.max_attempts == 3
        assert config.base_delay == 1.0
        assert config.jitter is True

    def test_presets(self):
        assert AGGRESSIVE_RETRY_CONFIG.max_attempts == 5
        assert CONSERVATIVE_RETRY_CONFIG.base_delay == 2.0
        assert NO_RETRY_CONFIG.max_attempts == 1


class TestCalculateDelay:
    def test_first_attempt_no_delay(self):
        config = RetryConfig(base_delay=1.0, jitter=False)
        assert calculate_delay(1, config) == 0.0

    def test_exponential_backoff(self):
        config = RetryConfig(base_delay=1.0, exponential_base=2.0, jitter=False)
        assert calculate_delay(2, config) == 1.0
        assert calculate_delay(3, config) == 2.0
        assert calculate_delay(4, config) == 4.0

    def test_max_delay_cap(self):
        config = RetryConfig(base_delay=1.0, max_delay=5.0, exponential_base=2.0, jitter=False)
        assert calculate_delay(10, config) == 5.0

    def test_jitter_stays_in_range(self):
        config = RetryConfig(base_delay=1.0, jitter=True, jitter_factor=0.5)
        delays = [calculate_delay(2, config) for _ in range(20)]
        assert all(0.5 <= d <= 1.5 for d in delays)


class TestIsRetryable:
    def test_transport_errors_retryable(self):
        assert is_retryable(httpx.ConnectError("refused"), DEFAULT_RETRY_CONFIG) is True
        assert is_retryable(TimeoutError("eth_getLogs", 10), DEFAULT_RETRY_CONFIG) is True
        assert is_retryable(ConnectionError("reset"), DEFAULT_RETRY_CONFIG) is True

    def test_rpc_error_object_not_retryable(self):
        assert is_retryable(RPCError("execution reverted"), DEFAULT_RETRY_CONFIG) is False

    def test_validation_error_not_retryable(self):
        assert is_retryable(InvalidAddressError("0x12"), DEFAULT_RETRY_CONFIG) is False

    def test_http_status(self):
        request = httpx.Request("POST", "https://rpc.example")
        busy = httpx.HTTPStatusError("busy", request=request, response=httpx.Response(503, request=request))
        missing = httpx.HTTPStatusError("missing", request=request, response=httpx.Response(404, request=request))
        assert is_retryable(busy, DEFAULT_RETRY_CONFIG) is True
        assert is_retryable(missing, DEFAULT_RETRY_CONFIG) is False


class TestRetryDecorator:
    def test_success_no_retry(self):
        call_count = 0

        @retry(config=FAST)
        def success_func():
            nonlocal call_count
            call_count += 1
            return "ok"

        assert success_func() == "ok"
        assert call_count == 1

    def test_retry_on_transport_error(self):
        call_count = 0

        @retry(config=FAST)
        def flaky_func():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise httpx.ConnectError("refused")
            return "ok"

        assert flaky_func() == "ok"
        assert call_count == 3

    def test_no_retry_on_rpc_error(self):
        call_count = 0

        @retry(config=FAST)
        def rpc_func():
            nonlocal call_count
            call_count += 1
            raise RPCError("query returned more than 10000 results")

        with pytest.raises(RPCError):
            rpc_func()
        assert call_count == 1

    def test_retry_exhausted(self):
        call_count = 0

        @retry(config=RetryConfig(max_attempts=2, base_delay=0.01, jitter=False), operation_name="eth_blockNumber")
        def always_fail():
            nonlocal call_count
            call_count += 1
            raise TimeoutError("eth_blockNumber", 1.0)

        with pytest.raises(RetryExhaustedError) as exc_info:
            always_fail()

        assert call_count == 2
        assert isinstance(exc_info.value.last_error, TimeoutError)
        assert exc_info.value.details["operation"] == "eth_blockNumber"


class TestRetryAsync:
    def test_retry_then_success(self):
        call_count = 0

        @retry_async(config=FAST)
        async def flaky():
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise httpx.ReadError("reset")
            return 42

        assert asyncio.run(flaky()) == 42
        assert call_count == 2

    def test_exhausted(self):
        @retry_async(config=RetryConfig(max_attempts=2, base_delay=0.01, jitter=False))
        async def always_fail():
            raise httpx.ConnectError("refused")

        with pytest.raises(RetryExhaustedError):
            asyncio.run(always_fail())
