import json
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

# Max tokens must be set for Anthropic
DEFAULT_MAX_TOKENS = 8192

JSON_INSTRUCTION = (
    "Respond with a single valid JSON value only, without prose or markdown fences."
)


class AnthropicProvider(BaseLLMProvider):
    """Anthropic-specific implementation of the provider interface."""

    def __init__(self, config_manager=None):
        from anthropic import AsyncAnthropic

        super().__init__(config_manager)

        api_key = self._config.claude_api_key
        if api_key:
            self._client = AsyncAnthropic(api_key=api_key, timeout=REQUEST_TIMEOUT)
        else:
            logger.info("ANTHROPIC_API_KEY is not set; Claude provider disabled")

    def get_name(self) -> str:
        return LLMProvider.CLAUDE.value

    async def send_request(self, options: LLMRequestOptions) -> LLMResponse:
        """
        Generate a response using the Anthropic Messages API.

        System turns are not valid messages for Claude; the system prompt is
        passed separately and any system-role messages are dropped.

        Raises:
            ProviderNotConfiguredError: If ANTHROPIC_API_KEY is not set
        """
        if self._client is None:
            raise ProviderNotConfiguredError("Claude")

        messages = [
            {
                "role": "assistant" if message.role == MessageRole.ASSISTANT else "user",
                "content": message.content,
            }
            for message in options.messages
            if message.role != MessageRole.SYSTEM
        ]

        params = {
            "model": options.model or self._config.claude_model,
            "messages": messages,
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
        }
        if options.system_prompt:
            params["system"] = options.system_prompt
        if options.temperature is not None:
            params["temperature"] = options.temperature

        response = await self._client.messages.create(**params)

        text = ""
        if response.content:
            text = getattr(response.content[0], "text", "") or ""

        return LLMResponse(
            content=text,
            finish_reason=response.stop_reason,
            model=response.model,
            raw_response=response,
        )

    async def send_structured_request(
        self, options: LLMRequestOptions, schema: Optional[dict] = None
    ) -> StructuredOutputResponse:
        instruction = JSON_INSTRUCTION
        if schema is not None:
            instruction += f"\nThe JSON must match this schema:\n{json.dumps(schema, indent=2)}"

        system_prompt = f"{options.system_prompt}\n\n{instruction}" if options.system_prompt else instruction

        response = await self.send_request(
            LLMRequestOptions(
                messages=options.messages,
                model=options.model,
                system_prompt=system_prompt,
                max_tokens=options.max_tokens,
                temperature=options.temperature,
            )
        )

        if not response.content:
            raise LLMResponseParseError("Claude", "", "no text content in response")

        parsed = extract_json(response.content)
        if parsed is None:
            logger.error(
                f"Failed to extract JSON from Claude response "
                f"({len(response.content)} chars): {response.content[:1000]}"
            )
            raise LLMResponseParseError("Claude", response.content)

        requests = parsed.get("requests", []) if isinstance(parsed, dict) else []
        return StructuredOutputResponse(data=parsed, requests=requests or [])
