import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from shadow_watch.llm.retry import RetryHandler, RetryOptions, is_retryable_error


class StatusError(Exception):
    def __init__(self, message, status_code=None, code=None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []

    async def fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return recorded


class TestIsRetryableError:
    patterns = RetryOptions().retryable_errors

    @pytest.mark.parametrize(
        "error",
        [
            Exception("Rate limit exceeded"),
            Exception("Request timed out"),
            Exception("network unreachable"),
            StatusError("server error", status_code=503),
            StatusError("bad gateway", status_code=502),
            StatusError("too many", status_code=429),
            StatusError("reset", code="ECONNRESET"),
            ConnectionError("refused"),
            asyncio.TimeoutError(),
        ],
    )
    def test_transient_errors(self, error):
        assert is_retryable_error(error, self.patterns) is True

    @pytest.mark.parametrize(
        "error",
        [
            ValueError("invalid input"),
            StatusError("unauthorized", status_code=401),
            StatusError("bad request", status_code=400),
        ],
    )
    def test_permanent_errors(self, error):
        assert is_retryable_error(error, self.patterns) is False

    def test_none(self):
        assert is_retryable_error(None, self.patterns) is False


class TestRetryHandler:
    async def test_success_on_first_attempt(self, sleeps):
        operation = AsyncMock(return_value="ok")
        result, attempts = await RetryHandler().execute_with_retry_and_count(operation)
        assert result == "ok"
        assert attempts == 1
        assert sleeps == []

    async def test_retries_transient_failures(self, sleeps):
        operation = AsyncMock(
            side_effect=[Exception("rate limit"), Exception("timeout"), "done"]
        )
        result, attempts = await RetryHandler().execute_with_retry_and_count(operation)
        assert result == "done"
        assert attempts == 3
        assert sleeps == [1.0, 2.0]

    async def test_non_retryable_error_is_raised_immediately(self, sleeps):
        error = ValueError("invalid api key format")
        operation = AsyncMock(side_effect=error)
        with pytest.raises(ValueError) as exc_info:
            await RetryHandler().execute_with_retry(operation)
        assert exc_info.value is error
        assert operation.await_count == 1
        assert sleeps == []

    async def test_last_error_after_exhausting_retries(self, sleeps):
        errors = [Exception(f"503 attempt {i}") for i in range(4)]
        operation = AsyncMock(side_effect=errors)
        with pytest.raises(Exception) as exc_info:
            await RetryHandler().execute_with_retry(operation)
        assert exc_info.value is errors[-1]
        assert operation.await_count == 4

    async def test_delay_is_capped(self, sleeps):
        options = RetryOptions(
            max_retries=4, initial_delay_ms=1000, max_delay_ms=2500, backoff_multiplier=2
        )
        operation = AsyncMock(side_effect=[Exception("timeout")] * 4 + ["ok"])
        await RetryHandler(options).execute_with_retry(operation)
        assert sleeps == [1.0, 2.0, 2.5, 2.5]

    async def test_on_retry_callback(self, sleeps):
        on_retry = MagicMock()
        error = Exception("overloaded")
        operation = AsyncMock(side_effect=[error, "ok"])
        await RetryHandler().execute_with_retry(operation, RetryOptions(on_retry=on_retry))
        on_retry.assert_called_once_with(1, error)
