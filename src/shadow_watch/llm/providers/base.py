from abc import ABC, abstractmethod
from typing import Any, Optional

from shadow_watch.config.settings import ConfigurationManager, get_configuration_manager
from shadow_watch.llm.types import (
    LLMMessage,
    LLMRequestOptions,
    LLMResponse,
    MessageRole,
    StructuredOutputResponse,
)

# Client-side timeout for a single request, in seconds
REQUEST_TIMEOUT = 300.0


class BaseLLMProvider(ABC):
    """
    Abstract base class for all LLM providers.

    This class defines the interface that all provider implementations
    must follow, hiding the differences between vendor SDKs.
    """

    def __init__(self, config_manager: Optional[ConfigurationManager] = None):
        """
        Initialize the provider.

        Args:
            config_manager: Source of API keys and model names. Defaults to
                the process-wide configuration manager.
        """
        self._config = config_manager or get_configuration_manager()
        self._client: Any = None

    def is_configured(self) -> bool:
        """Check if the provider has a client and is ready to use."""
        return self._client is not None

    @abstractmethod
    def get_name(self) -> str:
        """Get the provider key."""
        pass

    @abstractmethod
    async def send_request(self, options: LLMRequestOptions) -> LLMResponse:
        """
        Send a request and get a text response.

        Args:
            options: Messages and generation parameters

        Returns:
            The response text with its metadata

        Raises:
            ProviderNotConfiguredError: If no API key is configured
        """
        pass

    @abstractmethod
    async def send_structured_request(
        self, options: LLMRequestOptions, schema: Optional[dict] = None
    ) -> StructuredOutputResponse:
        """
        Send a request whose response must be JSON.

        Args:
            options: Messages and generation parameters
            schema: Optional JSON schema describing the expected output

        Returns:
            The parsed JSON data

        Raises:
            ProviderNotConfiguredError: If no API key is configured
            LLMResponseParseError: If the response holds no valid JSON
        """
        pass


def user_message(content: str) -> LLMMessage:
    """Shorthand for a single user turn."""
    return LLMMessage(role=MessageRole.USER, content=content)
