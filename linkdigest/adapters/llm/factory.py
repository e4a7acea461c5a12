"""Summarization provider factory.

Providers form a closed set selected by name: ``anthropic`` (``claude`` is
accepted as an alias) and ``openai``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from linkdigest.models.llm_models import ModelInfo, ProviderConfig

if TYPE_CHECKING:
    import httpx

    from linkdigest.adapters.llm.protocol import SummarizationProvider
    from linkdigest.config import AppConfig

logger = logging.getLogger(__name__)

VALID_PROVIDERS = frozenset({"anthropic", "openai"})

PROVIDER_ALIASES: dict[str, str] = {"claude": "anthropic"}

# Preferred order when the caller does not name a provider
PROVIDER_PRIORITY: tuple[str, ...] = ("anthropic", "openai")


def normalize_provider_name(name: str) -> str:
    """Lower-case ``name`` and resolve aliases.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = (name or "").lower().strip()
    provider = PROVIDER_ALIASES.get(provider, provider)
    if provider not in VALID_PROVIDERS:
        msg = f"Invalid provider: {name}. Must be one of {sorted(VALID_PROVIDERS)}"
        raise ValueError(msg)
    return provider


class ProviderFactory:
    """Factory for creating summarization providers.

    Usage:
        provider = ProviderFactory.create(ProviderConfig(name="openai", api_key=key))
        result = await provider.summarize(text, url)
    """

    @staticmethod
    def create(
        config: ProviderConfig, *, client: httpx.AsyncClient | None = None
    ) -> SummarizationProvider:
        """Create a provider for ``config.name``.

        Args:
            config: Provider name, credentials and call settings.
            client: Optional shared HTTP client.

        Raises:
            ValueError: If the provider is not supported.
        """
        provider = normalize_provider_name(config.name)

        logger.info("provider_factory_creating", extra={"provider": provider})

        if provider == "anthropic":
            from linkdigest.adapters.llm.anthropic import AnthropicProvider

            return AnthropicProvider(
                config.api_key,
                model=config.model,
                base_url=config.base_url,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                max_retries=config.max_retries,
                backoff_base=config.backoff_base,
                timeout_sec=config.timeout_sec,
                max_response_size_bytes=config.max_response_size_bytes,
                client=client,
            )

        from linkdigest.adapters.llm.openai import OpenAIProvider

        return OpenAIProvider(
            config.api_key,
            model=config.model,
            base_url=config.base_url,
            organization=config.organization,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            max_retries=config.max_retries,
            backoff_base=config.backoff_base,
            timeout_sec=config.timeout_sec,
            max_response_size_bytes=config.max_response_size_bytes,
            client=client,
        )

    @staticmethod
    def configs_from_app_config(config: AppConfig) -> list[ProviderConfig]:
        """Build provider configs for every backend with credentials, in priority order."""
        llm = config.llm
        shared = {
            "max_tokens": llm.max_tokens,
            "temperature": llm.temperature,
            "max_retries": llm.max_retries,
            "backoff_base": llm.backoff_base,
            "timeout_sec": float(config.runtime.request_timeout_sec),
            "max_response_size_bytes": llm.max_response_size_mb * 1024 * 1024,
        }
        configs: list[ProviderConfig] = []
        if config.anthropic.api_key:
            configs.append(
                ProviderConfig(
                    name="anthropic",
                    api_key=config.anthropic.api_key,
                    model=config.anthropic.model,
                    base_url=config.anthropic.base_url,
                    **shared,
                )
            )
        if config.openai.api_key:
            configs.append(
                ProviderConfig(
                    name="openai",
                    api_key=config.openai.api_key,
                    model=config.openai.model,
                    base_url=config.openai.base_url,
                    organization=config.openai.organization,
                    **shared,
                )
            )
        return configs

    @staticmethod
    async def list_models(
        name: str, api_key: str, *, client: httpx.AsyncClient | None = None
    ) -> list[ModelInfo]:
        """Dispatch to the named provider's static model listing."""
        provider = normalize_provider_name(name)
        if provider == "anthropic":
            from linkdigest.adapters.llm.anthropic import AnthropicProvider

            return await AnthropicProvider.list_models(api_key, client=client)

        from linkdigest.adapters.llm.openai import OpenAIProvider

        return await OpenAIProvider.list_models(api_key, client=client)
