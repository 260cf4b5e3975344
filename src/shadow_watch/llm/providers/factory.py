from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Type, Union

from shadow_watch.config.settings import ConfigurationManager, get_configuration_manager
from shadow_watch.llm.providers.anthropic_provider import AnthropicProvider
from shadow_watch.llm.providers.base import BaseLLMProvider
from shadow_watch.llm.providers.openai_provider import OpenAIProvider
from shadow_watch.llm.types import LLMProvider, resolve_provider
from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)

PROVIDER_CLASSES: Mapping[LLMProvider, Type[BaseLLMProvider]] = MappingProxyType(
    {
        LLMProvider.OPENAI: OpenAIProvider,
        LLMProvider.CLAUDE: AnthropicProvider,
    }
)


class ProviderFactory:
    """
    Factory for creating and caching LLM provider instances.

    Each provider is constructed on first use and the same instance is
    returned for every later request of the same key.
    """

    def __init__(self, config_manager: Optional[ConfigurationManager] = None):
        """
        Initialize the factory.

        Args:
            config_manager: Configuration handed to every provider it builds
        """
        self._config = config_manager or get_configuration_manager()
        self._providers: Dict[LLMProvider, BaseLLMProvider] = {}

    def get_provider(self, provider: Union[LLMProvider, str]) -> BaseLLMProvider:
        """
        Get the provider instance for a key.

        Args:
            provider: "openai" or "claude" (or the matching enum member)

        Returns:
            The cached provider instance

        Raises:
            UnknownProviderError: If the key is not recognized
        """
        key = resolve_provider(provider)
        if key not in self._providers:
            logger.debug(f"Creating {LLMProvider.get_display(key)} provider")
            self._providers[key] = PROVIDER_CLASSES[key](self._config)
        return self._providers[key]

    def get_current_provider(self) -> BaseLLMProvider:
        """Get the provider selected in configuration."""
        return self.get_provider(self._config.llm_provider)

    def is_provider_configured(self, provider: Union[LLMProvider, str]) -> bool:
        """Check if a provider has an API key."""
        return self.get_provider(provider).is_configured()

    def get_configured_providers(self) -> List[LLMProvider]:
        """Get all providers that have an API key."""
        return [key for key in LLMProvider if self.is_provider_configured(key)]

    @classmethod
    def list_providers(cls) -> List[str]:
        """Get a list of all known provider keys."""
        return [key.value for key in PROVIDER_CLASSES]
