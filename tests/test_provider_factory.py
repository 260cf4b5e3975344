import pytest

from shadow_watch.exceptions import UnknownProviderError
from shadow_watch.llm.providers.anthropic_provider import AnthropicProvider
from shadow_watch.llm.providers.factory import ProviderFactory
from shadow_watch.llm.providers.openai_provider import OpenAIProvider
from shadow_watch.llm.types import LLMProvider


@pytest.fixture
def factory(make_config):
    return ProviderFactory(make_config())


class TestGetProvider:
    def test_returns_openai_provider(self, factory):
        provider = factory.get_provider("openai")
        assert isinstance(provider, OpenAIProvider)
        assert provider.get_name() == "openai"

    def test_returns_claude_provider(self, factory):
        provider = factory.get_provider("claude")
        assert isinstance(provider, AnthropicProvider)
        assert provider.get_name() == "claude"

    def test_caches_instances(self, factory):
        assert factory.get_provider("openai") is factory.get_provider("openai")
        assert factory.get_provider("claude") is factory.get_provider(LLMProvider.CLAUDE)

    def test_distinct_keys_give_distinct_instances(self, factory):
        assert factory.get_provider("openai") is not factory.get_provider("claude")

    @pytest.mark.parametrize("key", ["unknown", "", "OpenAI", "gpt", None])
    def test_unknown_key_raises(self, factory, key):
        with pytest.raises(UnknownProviderError) as exc_info:
            factory.get_provider(key)
        assert str(exc_info.value) == f"Unknown provider: {key}"
        assert exc_info.value.provider == key

    def test_unknown_provider_error_is_value_error(self, factory):
        with pytest.raises(ValueError):
            factory.get_provider("mistral")


class TestConfiguredProviders:
    def test_no_keys(self, factory):
        assert factory.get_configured_providers() == []
        assert factory.is_provider_configured("openai") is False

    def test_with_keys(self, make_config):
        factory = ProviderFactory(make_config(OPENAI_API_KEY="sk-test"))
        assert factory.is_provider_configured("openai") is True
        assert factory.get_configured_providers() == [LLMProvider.OPENAI]

    def test_current_provider_follows_config(self, make_config):
        factory = ProviderFactory(make_config(SHADOW_WATCH_LLM_PROVIDER="claude"))
        assert isinstance(factory.get_current_provider(), AnthropicProvider)


def test_list_providers():
    assert ProviderFactory.list_providers() == ["openai", "claude"]
