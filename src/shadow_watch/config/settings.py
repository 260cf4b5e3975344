"""
Centralized configuration for Shadow Watch.

Settings are read from environment variables (a ``.env`` file is loaded by the
CLI entry point). Every property reads the environment on access, so changes
made after construction are picked up without rebuilding the manager.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional

from shadow_watch.exceptions import UnknownProviderError
from shadow_watch.llm.types import LLMProvider, resolve_provider

ENV_PREFIX = "SHADOW_WATCH_"

DEFAULT_EXCLUDE_PATTERNS = [
    "**/node_modules/**",
    "**/.git/**",
    "**/dist/**",
    "**/build/**",
    "**/__pycache__/**",
    "**/venv/**",
    "**/.venv/**",
]


class LLMFormat(str, Enum):
    """Output styles for formatted analysis issues."""

    CURSOR = "cursor"
    CHATGPT = "chatgpt"
    GENERIC = "generic"
    COMPACT = "compact"


class SeverityThreshold(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ConfigValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


class ConfigurationManager:
    """
    Type-safe access to Shadow Watch settings.

    Args:
        environ: Mapping to read settings from. Defaults to ``os.environ``.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def _get(self, key: str, default: str = "") -> str:
        value = self._environ.get(f"{ENV_PREFIX}{key}")
        return default if value is None else value.strip()

    def _get_int(self, key: str, default: int) -> int:
        value = self._get(key)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}{key} must be an integer, got {value!r}")

    @property
    def enabled(self) -> bool:
        return self._get("ENABLED", "true").lower() not in ("0", "false", "no", "off")

    @property
    def openai_api_key(self) -> str:
        return (
            self._get("OPENAI_API_KEY") or self._environ.get("OPENAI_API_KEY", "")
        ).strip()

    @property
    def claude_api_key(self) -> str:
        return (
            self._get("CLAUDE_API_KEY") or self._environ.get("ANTHROPIC_API_KEY", "")
        ).strip()

    @property
    def openai_model(self) -> str:
        return self._get("OPENAI_MODEL", "gpt-5.1")

    @property
    def claude_model(self) -> str:
        return self._get("CLAUDE_MODEL", "claude-sonnet-4-5")

    @property
    def llm_provider(self) -> LLMProvider:
        """
        The provider used for LLM requests.

        Raises:
            UnknownProviderError: If the configured value is not a known provider
        """
        return resolve_provider(self._get("LLM_PROVIDER", LLMProvider.OPENAI.value))

    @property
    def llm_format(self) -> LLMFormat:
        value = self._get("LLM_FORMAT", LLMFormat.CURSOR.value).lower()
        try:
            return LLMFormat(value)
        except ValueError:
            return LLMFormat.GENERIC

    @property
    def severity_threshold(self) -> SeverityThreshold:
        value = self._get("SEVERITY_THRESHOLD", SeverityThreshold.WARNING.value)
        return SeverityThreshold(value.lower())

    @property
    def analyze_interval(self) -> int:
        """Interval between background analyses, in milliseconds."""
        return self._get_int("ANALYZE_INTERVAL", 30000)

    @property
    def min_files_for_analysis(self) -> int:
        return self._get_int("MIN_FILES_FOR_ANALYSIS", 3)

    @property
    def max_file_size_kb(self) -> int:
        return self._get_int("MAX_FILE_SIZE_KB", 500)

    @property
    def exclude_patterns(self) -> List[str]:
        value = self._get("EXCLUDE_PATTERNS")
        if not value:
            return list(DEFAULT_EXCLUDE_PATTERNS)
        return [pattern.strip() for pattern in value.split(",") if pattern.strip()]

    def validate(self) -> ConfigValidationResult:
        """Check the provider/API key combination and numeric ranges."""
        errors = []

        try:
            provider = self.llm_provider
        except UnknownProviderError as e:
            errors.append(str(e))
            provider = None

        if provider == LLMProvider.OPENAI and not self.openai_api_key:
            errors.append("OpenAI API key is required when using OpenAI provider")

        if provider == LLMProvider.CLAUDE and not self.claude_api_key:
            errors.append("Claude API key is required when using Claude provider")

        numeric_checks = [
            ("ANALYZE_INTERVAL", 30000, 1000, "Analyze interval must be at least 1000ms"),
            ("MIN_FILES_FOR_ANALYSIS", 3, 1, "Minimum files for analysis must be at least 1"),
            ("MAX_FILE_SIZE_KB", 500, 1, "Maximum file size must be at least 1KB"),
        ]
        for key, default, minimum, message in numeric_checks:
            try:
                if self._get_int(key, default) < minimum:
                    errors.append(message)
            except ValueError as e:
                errors.append(str(e))

        return ConfigValidationResult(valid=not errors, errors=errors)

    def is_provider_configured(self) -> bool:
        """Check if the current provider has an API key."""
        return self.get_current_provider_api_key() is not None

    def get_current_provider_api_key(self) -> Optional[str]:
        """Get the API key for the current provider, or None if unset."""
        if self.llm_provider == LLMProvider.CLAUDE:
            return self.claude_api_key or None
        return self.openai_api_key or None


_config_manager: Optional[ConfigurationManager] = None


def get_configuration_manager() -> ConfigurationManager:
    """Get the process-wide configuration manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigurationManager()
    return _config_manager


def reset_configuration_manager() -> None:
    """Drop the process-wide configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
