from typing import Optional

from shadow_watch.config.settings import ConfigurationManager, get_configuration_manager
from shadow_watch.llm.providers.base import user_message
from shadow_watch.llm.providers.factory import ProviderFactory
from shadow_watch.llm.rate_limiter import RateLimiter
from shadow_watch.llm.retry import RetryHandler
from shadow_watch.llm.types import LLMRequestOptions
from shadow_watch.logging.logger import get_logger
from shadow_watch.planning.models import TestPlan
from shadow_watch.planning.prompts import PLANNING_SYSTEM_PROMPT

logger = get_logger(__name__)


class LLMService:
    """
    High-level LLM operations used by the extension workflows.

    Requests go to the provider selected in configuration, wait on the rate
    limiter and are retried on transient failures.
    """

    def __init__(
        self,
        provider_factory: Optional[ProviderFactory] = None,
        rate_limiter: Optional[RateLimiter] = None,
        retry_handler: Optional[RetryHandler] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        self._config = config_manager or get_configuration_manager()
        self._provider_factory = provider_factory or ProviderFactory(self._config)
        self._rate_limiter = rate_limiter or RateLimiter()
        self._retry_handler = retry_handler or RetryHandler()

    async def generate_test_strategy(self, prompt: str) -> TestPlan:
        """
        Ask the current provider for a test plan.

        Args:
            prompt: Planning prompt built by build_planning_prompt

        Returns:
            The plan described by the model's JSON response

        Raises:
            UnknownProviderError: If the configured provider is not known
            ProviderNotConfiguredError: If the provider has no API key
            LLMResponseParseError: If the response holds no JSON
            KeyError: If the JSON lacks required plan fields
        """
        provider_key = self._config.llm_provider
        provider = self._provider_factory.get_provider(provider_key)
        options = LLMRequestOptions(
            messages=[user_message(prompt)],
            system_prompt=PLANNING_SYSTEM_PROMPT,
        )

        async def request():
            await self._rate_limiter.wait_until_available(provider_key)
            self._rate_limiter.record_request(provider_key)
            return await provider.send_structured_request(options)

        logger.info(f"Requesting test strategy from {provider.get_name()}")
        response, attempts = await self._retry_handler.execute_with_retry_and_count(request)
        if attempts > 1:
            logger.info(f"Test strategy received after {attempts} attempts")

        return TestPlan.from_dict(response.data)
