"""Tests for the summarization provider factory."""

from __future__ import annotations

import httpx
import pytest

from linkdigest.adapters.llm.anthropic import AnthropicProvider
from linkdigest.adapters.llm.factory import (
    PROVIDER_PRIORITY,
    VALID_PROVIDERS,
    ProviderFactory,
    normalize_provider_name,
)
from linkdigest.adapters.llm.openai import OpenAIProvider
from linkdigest.config import load_config
from linkdigest.models.llm_models import ProviderConfig


class TestNormalizeProviderName:
    def test_valid_providers_constant(self) -> None:
        assert frozenset({"anthropic", "openai"}) == VALID_PROVIDERS
        assert PROVIDER_PRIORITY == ("anthropic", "openai")

    def test_claude_alias(self) -> None:
        assert normalize_provider_name("claude") == "anthropic"
        assert normalize_provider_name(" Claude ") == "anthropic"

    def test_case_insensitive(self) -> None:
        assert normalize_provider_name("OPENAI") == "openai"

    def test_invalid_provider_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid provider"):
            normalize_provider_name("gemini")


class TestProviderFactory:
    def test_create_anthropic(self) -> None:
        provider = ProviderFactory.create(
            ProviderConfig(name="claude", api_key="sk-ant", model="claude-3-opus-20240229")
        )
        assert isinstance(provider, AnthropicProvider)
        assert provider.name == "anthropic"
        assert provider.model == "claude-3-opus-20240229"
        assert provider.is_configured()

    def test_create_openai_with_default_model(self) -> None:
        provider = ProviderFactory.create(ProviderConfig(name="OpenAI", api_key="sk"))
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"

    def test_create_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="Invalid provider"):
            ProviderFactory.create(ProviderConfig(name="mistral", api_key="k"))

    def test_configs_from_app_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.setenv("CLAUDE_API_KEY", "sk-ant-env")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai-env")
        monkeypatch.setenv("OPENAI_ORGANIZATION", "org-9")
        monkeypatch.setenv("LLM_MAX_TOKENS", "750")
        monkeypatch.setenv("LLM_MAX_RESPONSE_SIZE_MB", "2")

        configs = ProviderFactory.configs_from_app_config(load_config())

        assert [c.name for c in configs] == ["anthropic", "openai"]
        assert configs[0].api_key == "sk-ant-env"
        assert configs[1].organization == "org-9"
        assert all(c.max_tokens == 750 for c in configs)
        assert all(c.max_response_size_bytes == 2 * 1024 * 1024 for c in configs)

    def test_configs_skip_missing_keys(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("ANTHROPIC_API_KEY", "CLAUDE_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai-env")

        configs = ProviderFactory.configs_from_app_config(load_config())

        assert [c.name for c in configs] == ["openai"]

    @pytest.mark.asyncio
    async def test_list_models_dispatches_by_name(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["x-api-key"] == "sk-ant"
            return httpx.Response(200, json={"data": [{"id": "claude-3-haiku-20240307"}]})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            models = await ProviderFactory.list_models("claude", "sk-ant", client=client)

        assert [m.id for m in models] == ["claude-3-haiku-20240307"]
