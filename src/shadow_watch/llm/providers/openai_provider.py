import json
from dataclasses import replace
from typing import Optional

from shadow_watch.exceptions import LLMResponseParseError, ProviderNotConfiguredError
from shadow_watch.llm.json_extractor import extract_json
from shadow_watch.llm.providers.base import REQUEST_TIMEOUT, BaseLLMProvider
from shadow_watch.llm.types import (
    LLMProvider,
    LLMRequestOptions,
    LLMResponse,
    MessageRole,
    StructuredOutputResponse,
)
from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI-specific implementation of the provider interface."""

    def __init__(self, config_manager=None):
        """
        Initialize the OpenAI provider.

        The client is only created when an API key is configured; otherwise
        the provider reports itself as unconfigured.
        """
        from openai import AsyncOpenAI

        super().__init__(config_manager)

        api_key = self._config.openai_api_key
        if api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=REQUEST_TIMEOUT)
        else:
            logger.info("OPENAI_API_KEY is not set; OpenAI provider disabled")

    def get_name(self) -> str:
        return LLMProvider.OPENAI.value

    async def send_request(self, options: LLMRequestOptions) -> LLMResponse:
        """
        Generate a response using the OpenAI Chat Completions API.

        Raises:
            ProviderNotConfiguredError: If OPENAI_API_KEY is not set
        """
        if self._client is None:
            raise ProviderNotConfiguredError("OpenAI")

        messages = [message.to_dict() for message in options.messages]
        if options.system_prompt:
            messages.insert(
                0, {"role": MessageRole.SYSTEM.value, "content": options.system_prompt}
            )

        params = {
            "model": options.model or self._config.openai_model,
            "messages": messages,
        }
        if options.temperature is not None:
            params["temperature"] = options.temperature
        if options.max_tokens is not None:
            params["max_tokens"] = options.max_tokens
        if options.response_format is not None:
            params["response_format"] = options.response_format

        response = await self._client.chat.completions.create(**params)

        first_choice = response.choices[0] if response.choices else None
        content = (first_choice.message.content if first_choice else None) or ""

        return LLMResponse(
            content=content,
            finish_reason=first_choice.finish_reason if first_choice else None,
            model=response.model,
            raw_response=response,
        )

    async def send_structured_request(
        self, options: LLMRequestOptions, schema: Optional[dict] = None
    ) -> StructuredOutputResponse:
        """
        Request JSON output and parse it.

        OpenAI's JSON mode does not enforce a schema, so when one is given it
        is appended to the system prompt as guidance.
        """
        system_prompt = options.system_prompt
        if schema is not None:
            system_prompt = (
                f"{system_prompt or ''}\n\nRespond with JSON matching this schema:\n"
                f"{json.dumps(schema, indent=2)}"
            ).strip()

        response = await self.send_request(
            replace(
                options,
                system_prompt=system_prompt,
                response_format={"type": "json_object"},
            )
        )

        parsed = extract_json(response.content)
        if parsed is None:
            logger.error(
                f"Failed to extract JSON from OpenAI response "
                f"({len(response.content)} chars): {response.content[:1000]}"
            )
            raise LLMResponseParseError("OpenAI", response.content)

        requests = parsed.get("requests", []) if isinstance(parsed, dict) else []
        return StructuredOutputResponse(data=parsed, requests=requests or [])
