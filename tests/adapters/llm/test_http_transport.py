"""Tests for the request and retry helpers shared by the LLM providers."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from linkdigest.adapters.llm.http_transport import ApiResponse, post_json, run_with_retries
from linkdigest.models.llm_models import LLMCallResult

URL = "https://llm.test/v1/complete"


def _error_message(data: Any) -> str:
    if isinstance(data, dict):
        return str(data.get("error", "unknown"))
    return "unknown"


async def _post(handler, **kwargs: Any) -> ApiResponse | LLMCallResult:
    kwargs.setdefault("max_response_size_bytes", 1024)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        return await post_json(
            client,
            URL,
            headers={"x-api-key": "secret"},
            body={"prompt": "hi"},
            timeout=5.0,
            model="test-model",
            api_label="Test",
            extract_error_message=_error_message,
            redacted_headers={"x-api-key": "[REDACTED]"},
            **kwargs,
        )


class _Attempts:
    def __init__(self, *results: LLMCallResult) -> None:
        self.results = list(results)
        self.calls = 0

    async def __call__(self) -> LLMCallResult:
        self.calls += 1
        return self.results.pop(0) if len(self.results) > 1 else self.results[0]


def _failure(status_code: int | None) -> LLMCallResult:
    return LLMCallResult(status="error", error_text="boom", status_code=status_code)


OK = LLMCallResult(status="ok", response_text="done", status_code=200)


class TestPostJson:
    @pytest.mark.asyncio
    async def test_success_returns_parsed_object(self) -> None:
        outcome = await _post(lambda request: httpx.Response(200, json={"text": "hi"}))

        assert isinstance(outcome, ApiResponse)
        assert outcome.data == {"text": "hi"}
        assert outcome.status_code == 200
        assert outcome.latency_ms >= 0

    @pytest.mark.asyncio
    async def test_api_error_carries_status_and_message(self) -> None:
        outcome = await _post(lambda request: httpx.Response(429, json={"error": "slow down"}))

        assert isinstance(outcome, LLMCallResult)
        assert outcome.error_text == "Test API error: 429 - slow down"
        assert outcome.status_code == 429
        assert outcome.request_headers == {"x-api-key": "[REDACTED]"}

    @pytest.mark.asyncio
    async def test_timeout_has_no_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        outcome = await _post(handler)

        assert isinstance(outcome, LLMCallResult)
        assert outcome.error_text.startswith("Request timeout")
        assert outcome.status_code is None

    @pytest.mark.asyncio
    async def test_non_object_json(self) -> None:
        outcome = await _post(lambda request: httpx.Response(200, json=["not", "an", "object"]))

        assert isinstance(outcome, LLMCallResult)
        assert outcome.error_text == "Unexpected response format from Test API"

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        outcome = await _post(lambda request: httpx.Response(200, text="<html>"))

        assert isinstance(outcome, LLMCallResult)
        assert outcome.error_text.startswith("Failed to parse JSON response")

    @pytest.mark.asyncio
    async def test_oversized_response(self) -> None:
        outcome = await _post(
            lambda request: httpx.Response(200, json={"text": "x" * 64}),
            max_response_size_bytes=16,
        )

        assert isinstance(outcome, LLMCallResult)
        assert outcome.error_text.startswith("Response too large")
        assert outcome.status_code == 200


class TestRunWithRetries:
    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(self) -> None:
        attempts = _Attempts(_failure(529), _failure(None), OK)

        result = await run_with_retries(
            attempts, max_retries=2, backoff_base=0, log_prefix="test"
        )

        assert result.ok
        assert attempts.calls == 3

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self) -> None:
        attempts = _Attempts(_failure(401), OK)

        result = await run_with_retries(
            attempts, max_retries=2, backoff_base=0, log_prefix="test"
        )

        assert result.status_code == 401
        assert attempts.calls == 1

    @pytest.mark.asyncio
    async def test_returns_last_failure_when_retries_run_out(self) -> None:
        attempts = _Attempts(_failure(503))

        result = await run_with_retries(
            attempts, max_retries=1, backoff_base=0, log_prefix="test"
        )

        assert not result.ok
        assert result.status_code == 503
        assert attempts.calls == 2
