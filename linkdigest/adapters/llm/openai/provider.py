"""OpenAI summarization provider.

Talks to the Chat Completions API directly over httpx and implements
``SummarizationProvider``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from linkdigest.adapters.llm import prompts
from linkdigest.adapters.llm.openai.request_builder import (
    DEFAULT_BASE_URL,
    OpenAIRequestBuilder,
    display_name,
    extract_error_message,
    extract_text,
    is_chat_model,
)
from linkdigest.adapters.llm.http_transport import post_json, run_with_retries
from linkdigest.config.llm import DEFAULT_OPENAI_MODEL
from linkdigest.core.async_utils import raise_if_cancelled
from linkdigest.models.llm_models import (
    LLMCallResult,
    ModelInfo,
    SufficiencyResult,
    SummaryResult,
)

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """OpenAI Chat Completions provider."""

    _provider_name: str = "openai"

    def __init__(
        self,
        api_key: str = "",
        *,
        model: str | None = None,
        base_url: str | None = None,
        organization: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        timeout_sec: float = 60.0,
        max_response_size_bytes: int = 10 * 1024 * 1024,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._model = model or DEFAULT_OPENAI_MODEL
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._timeout = httpx.Timeout(timeout_sec, connect=10.0)
        self._max_response_size_bytes = max_response_size_bytes
        self._request_builder = OpenAIRequestBuilder(self._api_key, organization=organization)
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
        if self._closed:
            return
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> OpenAIProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def validate_config(self) -> bool:
        if not self.is_configured():
            return False
        try:
            result = await self._complete(
                prompts.VALIDATION_PROMPT, max_tokens=50, temperature=None, max_retries=0
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning("openai_validation_error", extra={"error": str(exc)})
            return False
        if not result.ok:
            logger.warning(
                "openai_validation_failed",
                extra={"status_code": result.status_code, "error": result.error_text},
            )
        return result.ok

    async def summarize(self, text: str, url: str, title: str | None = None) -> SummaryResult:
        if not self.is_configured():
            return prompts.error_summary_result(self.name, "OpenAI API key not configured")

        try:
            result = await self._complete(
                prompts.build_summary_prompt(text, url, title),
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                json_mode=True,
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.exception("openai_summarize_error", extra={"url": url})
            return prompts.error_summary_result(self.name, str(exc))

        if not result.ok:
            logger.warning(
                "openai_summarize_failed",
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
                reason="Heuristic assessment - OpenAI API not configured",
            )

        try:
            result = await self._complete(
                prompts.build_sufficiency_prompt(text, url, title),
                max_tokens=prompts.SUFFICIENCY_MAX_TOKENS,
                temperature=prompts.SUFFICIENCY_TEMPERATURE,
                json_mode=True,
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            result = LLMCallResult(status="error", error_text=str(exc))

        if not result.ok:
            logger.warning("openai_sufficiency_failed", extra={"url": url, "error": result.error_text})
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
        json_mode: bool = False,
        max_retries: int | None = None,
    ) -> LLMCallResult:
        """Run one completion, retrying transient failures with backoff."""
        client = self._get_client()
        return await run_with_retries(
            lambda: self._attempt_request(
                client,
                prompt,
                max_tokens=max_tokens,
                temperature=temperature,
                json_mode=json_mode,
            ),
            max_retries=self._max_retries if max_retries is None else max_retries,
            backoff_base=self._backoff_base,
            log_prefix="openai",
        )

    async def _attempt_request(
        self,
        client: httpx.AsyncClient,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float | None,
        json_mode: bool,
    ) -> LLMCallResult:
        headers = self._request_builder.build_headers()
        body = self._request_builder.build_request_body(
            self._model,
            prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=json_mode,
        )
        redacted = self._request_builder.get_redacted_headers(headers)

        outcome = await post_json(
            client,
            f"{self._base_url}/chat/completions",
            headers=headers,
            body=body,
            timeout=self._timeout,
            model=self._model,
            api_label="OpenAI",
            max_response_size_bytes=self._max_response_size_bytes,
            extract_error_message=extract_error_message,
            redacted_headers=redacted,
        )
        if isinstance(outcome, LLMCallResult):
            return outcome

        data = outcome.data
        choices = data.get("choices") or []
        if choices and isinstance(choices[0], dict) and choices[0].get("finish_reason") == "length":
            logger.warning("openai_response_truncated", extra={"model": self._model})

        usage = data.get("usage") or {}
        return LLMCallResult(
            status="ok",
            model=data.get("model", self._model),
            response_text=extract_text(data),
            status_code=outcome.status_code,
            tokens_prompt=usage.get("prompt_tokens"),
            tokens_completion=usage.get("completion_tokens"),
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
        """List chat models available to ``api_key``, newest first; empty on failure."""
        if not api_key:
            return []

        headers = OpenAIRequestBuilder(api_key).build_headers()
        url = f"{(base_url or DEFAULT_BASE_URL).rstrip('/')}/models"
        http = client or httpx.AsyncClient(timeout=timeout_sec)
        try:
            resp = await http.get(url, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("openai_list_models_failed", extra={"error": str(exc)})
            return []
        finally:
            if client is None:
                await http.aclose()

        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("openai_list_models_invalid_format")
            return []

        chat_models = [
            entry
            for entry in entries
            if isinstance(entry, dict)
            and isinstance(entry.get("id"), str)
            and is_chat_model(entry["id"])
        ]
        chat_models.sort(key=lambda entry: _as_int(entry.get("created")), reverse=True)

        return [
            ModelInfo(
                id=entry["id"],
                name=display_name(entry["id"]),
                description=_created_description(entry.get("created")),
            )
            for entry in chat_models
        ]


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _created_description(created: Any) -> str | None:
    timestamp = _as_int(created)
    if timestamp <= 0:
        return None
    return f"Created: {datetime.fromtimestamp(timestamp, tz=UTC).date().isoformat()}"
