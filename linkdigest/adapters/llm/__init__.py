"""Summarization provider adapters.

This package provides a unified interface over multiple LLM backends:
- Anthropic: Messages API
- OpenAI: Chat Completions API

Usage:
    from linkdigest.adapters.llm import ProviderFactory
    from linkdigest.models.llm_models import ProviderConfig

    provider = ProviderFactory.create(ProviderConfig(name="anthropic", api_key=key))
    result = await provider.summarize(text, url, title)
"""

from linkdigest.adapters.llm.factory import (
    PROVIDER_PRIORITY,
    VALID_PROVIDERS,
    ProviderFactory,
    normalize_provider_name,
)
from linkdigest.adapters.llm.model_cache import ModelCache
from linkdigest.adapters.llm.protocol import SummarizationProvider

__all__ = [
    "PROVIDER_PRIORITY",
    "VALID_PROVIDERS",
    "ModelCache",
    "ProviderFactory",
    "SummarizationProvider",
    "normalize_provider_name",
]
