"""Tests for SummarizationProvider protocol compliance."""

from __future__ import annotations

from linkdigest.adapters.llm.anthropic import AnthropicProvider
from linkdigest.adapters.llm.openai import OpenAIProvider
from linkdigest.adapters.llm.protocol import SummarizationProvider


class TestSummarizationProviderProtocol:
    def test_anthropic_provider_is_protocol_compliant(self) -> None:
        assert isinstance(AnthropicProvider("key"), SummarizationProvider)

    def test_openai_provider_is_protocol_compliant(self) -> None:
        assert isinstance(OpenAIProvider("key"), SummarizationProvider)

    def test_providers_expose_static_list_models(self) -> None:
        assert callable(AnthropicProvider.list_models)
        assert callable(OpenAIProvider.list_models)

    def test_provider_names_are_unique(self) -> None:
        providers = {AnthropicProvider._provider_name, OpenAIProvider._provider_name}
        assert providers == {"anthropic", "openai"}
