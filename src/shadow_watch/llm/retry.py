"""
Retry handling for LLM API requests.

Operations are retried with exponential backoff, but only when the failure
looks transient (rate limits, timeouts, network trouble, 5xx responses).
Anything else is re-raised immediately.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

NETWORK_ERROR_CODES = {"econnreset", "etimedout", "enotfound", "econnrefused"}


@dataclass
class RetryOptions:
    max_retries: int = 3
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30000
    backoff_multiplier: float = 2
    retryable_errors: List[str] = field(
        default_factory=lambda: [
            "rate_limit",
            "rate limit",
            "too_many_requests",
            "timeout",
            "timed out",
            "network",
            "connection",
            "ECONNRESET",
            "ETIMEDOUT",
            "ENOTFOUND",
            "temporary",
            "overloaded",
            "503",
            "429",
            "500",
        ]
    )
    on_retry: Optional[Callable[[int, BaseException], None]] = None


def _status_of(error: BaseException) -> Optional[int]:
    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def is_retryable_error(error: Optional[BaseException], patterns: List[str]) -> bool:
    """
    Check if an error is worth retrying.

    Args:
        error: The exception raised by the operation
        patterns: Substrings that mark an error as transient when found in
            its message, code or status

    Returns:
        True if the operation should be attempted again
    """
    if error is None:
        return False

    message = str(error).lower()
    code = str(getattr(error, "code", "") or "").lower()
    status = _status_of(error)

    for pattern in patterns:
        lowered = pattern.lower()
        if lowered in message or lowered in code or (status is not None and pattern in str(status)):
            return True

    if code in NETWORK_ERROR_CODES:
        return True

    if isinstance(error, (asyncio.TimeoutError, ConnectionError)):
        return True

    return status is not None and (status == 429 or 500 <= status < 600)


class RetryHandler:
    """Executes async operations with exponential backoff."""

    def __init__(self, options: Optional[RetryOptions] = None):
        self._options = options or RetryOptions()

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        options: Optional[RetryOptions] = None,
    ) -> T:
        """
        Execute an operation with retry logic.

        Args:
            operation: Zero-argument coroutine function to run
            options: Overrides the handler's default options for this call

        Returns:
            The operation's result

        Raises:
            Exception: The last error once retries are exhausted, or the first
                non-retryable error, unchanged
        """
        result, _ = await self.execute_with_retry_and_count(operation, options)
        return result

    async def execute_with_retry_and_count(
        self,
        operation: Callable[[], Awaitable[T]],
        options: Optional[RetryOptions] = None,
    ) -> Tuple[T, int]:
        """Execute with retry and return the result with the attempt count."""
        opts = options or self._options
        delay = opts.initial_delay_ms

        for attempt in range(opts.max_retries + 1):
            try:
                return await operation(), attempt + 1
            except Exception as e:
                if attempt >= opts.max_retries or not is_retryable_error(e, opts.retryable_errors):
                    raise

                if opts.on_retry:
                    opts.on_retry(attempt + 1, e)

                logger.warning(
                    f"Retry attempt {attempt + 1}/{opts.max_retries} after {delay}ms. Error: {e}"
                )
                await asyncio.sleep(delay / 1000)
                delay = min(delay * opts.backoff_multiplier, opts.max_delay_ms)

        # max_retries < 0 leaves the loop without an attempt
        raise ValueError("max_retries must be at least 0")
