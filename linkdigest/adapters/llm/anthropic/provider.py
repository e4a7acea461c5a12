"""Anthropic summarization provider.

Talks to the Messages API directly over httpx and implements
``SummarizationProvider``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from linkdigest.adapters.llm import prompts
from linkdigest.adapters.llm.anthropic.request_builder import (
    DEFAULT_BASE_URL,
    AnthropicRequestBuilder,
    extract_error_message,
    extract_text,
)
from linkdigest.adapters.llm.http_transport import post_json, run_with_retries
from linkdigest.config.llm import DEFAULT_ANTHROPIC_MODEL
from linkdigest.core.async_utils import raise_if_cancelled
from linkdigest.models.llm_models import (
    LLMCallResult,
    ModelInfo,
    SufficiencyResult,
    SummaryResult,
)

logger = logging.getLogger(__name__)


class AnthropicProvider:
    """Anthropic Messages API provider."""

    _provider_name: str = "anthropic"

    def __init__(
        self,
        api_key: str = "",
        *,
        model: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        timeout_sec: float = 60.0,
        max_response_size_bytes: int = 10 * 1024 * 1024,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Anthropic API key. An empty key leaves the provider unconfigured.
            model: Model to use; defaults to the small Haiku model.
            base_url: API root, mainly for tests and proxies.
            max_tokens: Completion budget for summaries.
            temperature: Sampling temperature for summaries.
            max_retries: Retries after the first attempt for transient failures.
            backoff_base: Base delay for exponential backoff.
            timeout_sec: Request timeout in seconds.
            max_response_size_bytes: Reject responses larger than this.
            client: Optional shared AsyncClient; the provider never closes it.
        """
        self._api_key = (api_key or "").strip()
        self._model = model or DEFAULT_ANTHROPIC_MODEL
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._timeout = httpx.Timeout(timeout_sec, connect=10.0)
        self._max_response_size_bytes = max_response_size_bytes
        self._request_builder = AnthropicRequestBuilder(self._api_key)
        self._client = client
        self._owns_client = client is None
        self._closed = False

    @property
    def name(self) -> str:
        return self._provider_name

    @property
    def model(self) -> str:
        return self._model

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._closed:
            msg = "Provider has been closed"
            raise RuntimeError(msg)
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the provider and its HTTP client, if it owns one."""
        if self._closed:
            return
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> AnthropicProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def validate_config(self) -> bool:
        """Send a tiny live request; False on any failure."""
        if not self.is_configured():
            return False
        try:
            result = await self._complete(
                prompts.VALIDATION_PROMPT, max_tokens=100, temperature=None, max_retries=0
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning("anthropic_validation_error", extra={"error": str(exc)})
            return False
        if not result.ok:
            logger.warning(
                "anthropic_validation_failed",
                extra={"status_code": result.status_code, "error": result.error_text},
            )
        return result.ok

    async def summarize(self, text: str, url: str, title: str | None = None) -> SummaryResult:
        if not self.is_configured():
            return prompts.error_summary_result(self.name, "Anthropic API key not configured")

        try:
            result = await self._complete(
                prompts.build_summary_prompt(text, url, title),
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.exception("anthropic_summarize_error", extra={"url": url})
            return prompts.error_summary_result(self.name, str(exc))

        if not result.ok:
            logger.warning(
                "anthropic_summarize_failed",
                extra={"url": url, "status_code": result.status_code, "error": result.error_text},
            )
            return prompts.error_summary_result(self.name, result.error_text or "Unknown error")

        return prompts.build_summary_result(
            result.response_text, provider=self.name, original_text=text, url=url
        )

    async def assess_content_sufficiency(
        self, text: str, url: str, title: str | None = None
    ) -> SufficiencyResult:
        if not self.is_configured():
            return prompts.heuristic_sufficiency(
                text,
                title,
                confidence=0.6,
                reason="Heuristic assessment - Anthropic API not configured",
            )

        try:
            result = await self._complete(
                prompts.build_sufficiency_prompt(text, url, title),
                max_tokens=prompts.SUFFICIENCY_MAX_TOKENS,
                temperature=prompts.SUFFICIENCY_TEMPERATURE,
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            result = LLMCallResult(status="error", error_text=str(exc))

        if not result.ok:
            logger.warning(
                "anthropic_sufficiency_failed",
                extra={"url": url, "error": result.error_text},
            )
            return prompts.heuristic_sufficiency(
                text,
                title,
                confidence=0.5,
                reason=f"AI assessment failed: {result.error_text}. Using fallback heuristic.",
            )
        return prompts.parse_sufficiency_response(result.response_text, text, title)

    async def _complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float | None,
        max_retries: int | None = None,
    ) -> LLMCallResult:
        """Run one completion, retrying transient failures with backoff."""
        client = self._get_client()
        return await run_with_retries(
            lambda: self._attempt_request(
                client, prompt, max_tokens=max_tokens, temperature=temperature
            ),
            max_retries=self._max_retries if max_retries is None else max_retries,
            backoff_base=self._backoff_base,
            log_prefix="anthropic",
        )

    async def _attempt_request(
        self,
        client: httpx.AsyncClient,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float | None,
    ) -> LLMCallResult:
        headers = self._request_builder.build_headers()
        body = self._request_builder.build_request_body(
            self._model, prompt, max_tokens=max_tokens, temperature=temperature
        )
        redacted = self._request_builder.get_redacted_headers(headers)

        outcome = await post_json(
            client,
            f"{self._base_url}/messages",
            headers=headers,
            body=body,
            timeout=self._timeout,
            model=self._model,
            api_label="Anthropic",
            max_response_size_bytes=self._max_response_size_bytes,
            extract_error_message=extract_error_message,
            redacted_headers=redacted,
        )
        if isinstance(outcome, LLMCallResult):
            return outcome

        data = outcome.data
        if data.get("stop_reason") == "max_tokens":
            logger.warning("anthropic_response_truncated", extra={"model": self._model})

        usage = data.get("usage") or {}
        return LLMCallResult(
            status="ok",
            model=data.get("model", self._model),
            response_text=extract_text(data),
            status_code=outcome.status_code,
            tokens_prompt=usage.get("input_tokens"),
            tokens_completion=usage.get("output_tokens"),
            latency_ms=outcome.latency_ms,
            request_headers=redacted,
        )

    @staticmethod
    async def list_models(
        api_key: str,
        *,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout_sec: float = 10.0,
    ) -> list[ModelInfo]:
        """List models available to ``api_key``; an empty list on any failure."""
        if not api_key:
            return []

        headers = AnthropicRequestBuilder(api_key).build_headers()
        url = f"{(base_url or DEFAULT_BASE_URL).rstrip('/')}/models"
        http = client or httpx.AsyncClient(timeout=timeout_sec)
        try:
            resp = await http.get(url, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("anthropic_list_models_failed", extra={"error": str(exc)})
            return []
        finally:
            if client is None:
                await http.aclose()

        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("anthropic_list_models_invalid_format")
            return []

        models: list[ModelInfo] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                continue
            models.append(
                ModelInfo(
                    id=entry["id"],
                    name=entry.get("display_name") or entry["id"],
                    description=_created_description("Model created", entry.get("created_at")),
                )
            )
        return models


def _created_description(prefix: str, created_at: Any) -> str | None:
    if not isinstance(created_at, str) or not created_at:
        return None
    try:
        created = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    return f"{prefix}: {created.astimezone(UTC).date().isoformat()}"
