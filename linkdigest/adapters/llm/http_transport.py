"""Request and retry helpers shared by the LLM providers.

Both providers post a JSON body, map transport failures and API errors onto
``LLMCallResult`` and retry transient failures the same way; only the
endpoint and the response shape differ.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

import httpx

from linkdigest.core.backoff import sleep_backoff
from linkdigest.core.http_utils import (
    ResponseSizeError,
    is_transient_status,
    validate_response_size,
)
from linkdigest.models.llm_models import LLMCallResult

logger = logging.getLogger(__name__)


class ApiResponse(NamedTuple):
    """A successful (HTTP 200) JSON object response."""

    data: dict[str, Any]
    status_code: int
    latency_ms: int


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str],
    body: dict[str, Any],
    timeout: float,
    model: str,
    api_label: str,
    max_response_size_bytes: int,
    extract_error_message: Callable[[Any], str],
    redacted_headers: dict[str, str] | None = None,
) -> ApiResponse | LLMCallResult:
    """POST ``body`` and return the parsed response, or an error result.

    Every failure mode (timeout, transport error, oversized or unparsable
    body, non-200 status, non-object JSON) comes back as an error
    ``LLMCallResult`` carrying the status code when one was received.
    """
    started = time.perf_counter()
    try:
        resp = await client.post(url, headers=headers, json=body, timeout=timeout)
    except httpx.TimeoutException as exc:
        return LLMCallResult(
            status="error",
            model=model,
            error_text=f"Request timeout: {exc}",
            latency_ms=int((time.perf_counter() - started) * 1000),
            request_headers=redacted_headers,
        )
    except httpx.TransportError as exc:
        return LLMCallResult(
            status="error",
            model=model,
            error_text=f"Request failed: {exc}",
            latency_ms=int((time.perf_counter() - started) * 1000),
            request_headers=redacted_headers,
        )
    latency = int((time.perf_counter() - started) * 1000)

    try:
        validate_response_size(resp, max_response_size_bytes, api_label)
    except ResponseSizeError as exc:
        return LLMCallResult(
            status="error",
            model=model,
            error_text=f"Response too large: {exc}",
            status_code=resp.status_code,
            latency_ms=latency,
        )

    try:
        data = resp.json()
    except ValueError as exc:
        return LLMCallResult(
            status="error",
            model=model,
            error_text=f"Failed to parse JSON response: {exc}",
            status_code=resp.status_code,
            latency_ms=latency,
        )

    if resp.status_code != 200:
        return LLMCallResult(
            status="error",
            model=model,
            error_text=f"{api_label} API error: {resp.status_code} - {extract_error_message(data)}",
            status_code=resp.status_code,
            latency_ms=latency,
            request_headers=redacted_headers,
        )

    if not isinstance(data, dict):
        return LLMCallResult(
            status="error",
            model=model,
            error_text=f"Unexpected response format from {api_label} API",
            status_code=resp.status_code,
            latency_ms=latency,
        )

    return ApiResponse(data, resp.status_code, latency)


async def run_with_retries(
    attempt_fn: Callable[[], Awaitable[LLMCallResult]],
    *,
    max_retries: int,
    backoff_base: float,
    log_prefix: str,
) -> LLMCallResult:
    """Call ``attempt_fn`` until it succeeds or a non-transient error occurs.

    Failures without a status code (timeouts, connection errors) and
    transient HTTP statuses are retried up to ``max_retries`` times with
    jittered exponential backoff. Returns the last result.
    """
    result = LLMCallResult(status="error", error_text="No attempt made")

    for attempt in range(max_retries + 1):
        result = await attempt_fn()
        if result.ok:
            return result

        retryable = result.status_code is None or is_transient_status(result.status_code)
        if not retryable or attempt >= max_retries:
            break
        logger.info(
            f"{log_prefix}_retrying",
            extra={
                "attempt": attempt + 1,
                "status_code": result.status_code,
                "error": result.error_text,
            },
        )
        await sleep_backoff(attempt, backoff_base)

    return result


__all__ = ["ApiResponse", "post_json", "run_with_retries"]
