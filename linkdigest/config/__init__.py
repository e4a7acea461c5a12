from __future__ import annotations

from ._validators import _ensure_api_key, validate_model_name
from .content import ContentExtractionConfig
from .jobs import JobQueueConfig
from .llm import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_OPENAI_MODEL,
    AnthropicConfig,
    LLMCallConfig,
    OpenAIConfig,
)
from .settings import AppConfig, RuntimeConfig, Settings, load_config

__all__ = [
    "DEFAULT_ANTHROPIC_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "AnthropicConfig",
    "AppConfig",
    "ContentExtractionConfig",
    "JobQueueConfig",
    "LLMCallConfig",
    "OpenAIConfig",
    "RuntimeConfig",
    "Settings",
    "_ensure_api_key",
    "load_config",
    "validate_model_name",
]
