"""Anthropic request builder for constructing API payloads."""

from __future__ import annotations

from typing import Any

ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_BASE_URL = "https://api.anthropic.com/v1"


class AnthropicRequestBuilder:
    """Builds request headers and payloads for Anthropic API calls."""

    def __init__(self, api_key: str, *, anthropic_version: str = ANTHROPIC_VERSION) -> None:
        self._api_key = api_key
        self._anthropic_version = anthropic_version

    def build_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
            "anthropic-version": self._anthropic_version,
        }

    def build_request_body(
        self,
        model: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float | None = None,
    ) -> dict[str, Any]:
        """Build the request body for the Messages API.

        Anthropic requires ``max_tokens`` and caps ``temperature`` at 1.0.
        """
        body: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            body["temperature"] = min(temperature, 1.0)
        return body

    def get_redacted_headers(self, headers: dict[str, str]) -> dict[str, str]:
        """Return headers with sensitive values redacted."""
        redacted = dict(headers)
        if "x-api-key" in redacted:
            redacted["x-api-key"] = "[REDACTED]"
        return redacted


def extract_error_message(data: Any) -> str:
    """Extract error message from API response.

    Anthropic error format: {"type": "error", "error": {"type": "...", "message": "..."}}
    """
    if not isinstance(data, dict):
        return "Unknown API error"
    error = data.get("error", {})
    if isinstance(error, dict):
        return error.get("message", "Unknown API error")
    if isinstance(error, str):
        return error
    return data.get("message", "Unknown API error")


def extract_text(data: dict[str, Any]) -> str:
    """Concatenate the text blocks of a Messages API response."""
    text = ""
    for block in data.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            text += block.get("text", "")
    return text
