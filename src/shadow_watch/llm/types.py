from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from shadow_watch.exceptions import UnknownProviderError


class LLMProvider(str, Enum):
    """Enum for the supported LLM vendors."""

    OPENAI = "openai"
    CLAUDE = "claude"

    @classmethod
    def get_display(cls, value):
        """Get the display name for a given provider value."""
        display_map = {
            cls.OPENAI: "OpenAI",
            cls.CLAUDE: "Claude",
        }
        return display_map.get(value, value)


class MessageRole(str, Enum):
    """Enum for Message role values."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class LLMMessage:
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": MessageRole(self.role).value, "content": self.content}


@dataclass
class LLMRequestOptions:
    """Provider-neutral description of a single LLM request."""

    messages: List[LLMMessage]
    model: Optional[str] = None
    system_prompt: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    response_format: Optional[Dict[str, str]] = None


@dataclass
class LLMResponse:
    content: str
    finish_reason: Optional[str] = None
    model: Optional[str] = None
    raw_response: Any = None


@dataclass
class StructuredOutputResponse:
    data: Any
    requests: List[Dict[str, Any]] = field(default_factory=list)


def resolve_provider(provider: Union[LLMProvider, str, Any]) -> LLMProvider:
    """
    Map an externally supplied key onto the provider enum.

    Matching is exact and case-sensitive.

    Raises:
        UnknownProviderError: If the key names no known provider
    """
    if isinstance(provider, LLMProvider):
        return provider
    try:
        return LLMProvider(provider)
    except ValueError:
        raise UnknownProviderError(provider) from None
