"""
Rate limiting for outbound LLM requests.

Each provider has a fixed budget of requests per time window. Request
timestamps are tracked per provider and a request is admitted while fewer
than ``max_requests`` fall inside the trailing window.
"""

import asyncio
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Union

from shadow_watch.llm.types import LLMProvider, resolve_provider
from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)

# Extra wait after the oldest request leaves the window, in milliseconds
WAIT_BUFFER_MS = 100


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int
    window_ms: int

    def __post_init__(self):
        if self.max_requests <= 0:
            raise ValueError("max_requests must be greater than 0")
        if self.window_ms <= 0:
            raise ValueError("window_ms must be greater than 0")


def default_rate_limits() -> Dict[LLMProvider, RateLimitConfig]:
    return {
        LLMProvider.OPENAI: RateLimitConfig(max_requests=60, window_ms=60000),
        LLMProvider.CLAUDE: RateLimitConfig(max_requests=50, window_ms=60000),
    }


class RateLimiter:
    """
    Sliding-window rate limiter keyed by provider.

    Args:
        configs: Optional overrides merged over the default limits. The
            resulting configuration cannot be changed afterwards.
        clock: Monotonic clock in seconds, injectable for tests
    """

    def __init__(
        self,
        configs: Optional[Mapping[Union[LLMProvider, str], RateLimitConfig]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        merged = default_rate_limits()
        for provider, config in (configs or {}).items():
            merged[resolve_provider(provider)] = config

        self._configs: Mapping[LLMProvider, RateLimitConfig] = MappingProxyType(merged)
        self._history: Dict[LLMProvider, List[float]] = {}
        self._clock = clock

    @property
    def configs(self) -> Mapping[LLMProvider, RateLimitConfig]:
        """Read-only view of the per-provider limits."""
        return self._configs

    def get_config(self, provider: Union[LLMProvider, str]) -> Optional[RateLimitConfig]:
        return self._configs.get(resolve_provider(provider))

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _recent_requests(self, provider: LLMProvider, config: RateLimitConfig) -> List[float]:
        window_start = self._now_ms() - config.window_ms
        recent = [ts for ts in self._history.get(provider, []) if ts > window_start]
        self._history[provider] = recent
        return recent

    def can_make_request(self, provider: Union[LLMProvider, str]) -> bool:
        """Check if a request can be made now; True when no limit is set."""
        key = resolve_provider(provider)
        config = self._configs.get(key)
        if config is None:
            return True
        return len(self._recent_requests(key, config)) < config.max_requests

    def record_request(self, provider: Union[LLMProvider, str]) -> None:
        """Record that a request was sent for the given provider."""
        key = resolve_provider(provider)
        self._history.setdefault(key, []).append(self._now_ms())

    async def wait_until_available(self, provider: Union[LLMProvider, str]) -> None:
        """
        Wait until a request can be made.

        Returns immediately when the provider is under its limit; otherwise
        sleeps until the oldest request in the window expires.
        """
        key = resolve_provider(provider)
        config = self._configs.get(key)
        if config is None:
            return

        recent = self._recent_requests(key, config)
        if len(recent) < config.max_requests:
            return

        wait_ms = min(recent) + config.window_ms - self._now_ms() + WAIT_BUFFER_MS
        if wait_ms > 0:
            logger.info(f"Rate limit reached for {key.value}. Waiting {wait_ms:.0f}ms...")
            await asyncio.sleep(wait_ms / 1000)

    def get_request_count(self, provider: Union[LLMProvider, str]) -> int:
        """Get the number of requests made in the current window."""
        key = resolve_provider(provider)
        config = self._configs.get(key)
        if config is None:
            return 0
        return len(self._recent_requests(key, config))

    def clear_history(self, provider: Optional[Union[LLMProvider, str]] = None) -> None:
        """Clear request history for one provider, or for all of them."""
        if provider is None:
            self._history.clear()
        else:
            self._history.pop(resolve_provider(provider), None)
