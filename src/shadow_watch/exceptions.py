"""
Custom exceptions for Shadow Watch.

This module defines the exception hierarchy used for provider lookup and LLM
response handling. Filesystem errors are not wrapped and surface as the
built-in ``OSError`` family.
"""

from typing import Any, Optional


class ShadowWatchError(Exception):
    """Base class for all Shadow Watch errors."""

    pass


class UnknownProviderError(ShadowWatchError, ValueError):
    """Raised when an LLM provider key is not recognized."""

    def __init__(self, provider: Any):
        self.provider = provider
        super().__init__(f"Unknown provider: {provider}")


class ProviderNotConfiguredError(ShadowWatchError):
    """Raised when a provider is used without an API key."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider} API key not configured")


class LLMResponseParseError(ShadowWatchError):
    """Raised when structured output cannot be extracted from a response."""

    def __init__(self, provider: str, content: str, error: Optional[str] = None):
        self.provider = provider
        self.content = content
        self.error = error
        super().__init__(
            f"Failed to extract valid JSON from {provider} response"
            + (f": {error}" if error else "")
        )
