"""OpenAI request builder for constructing API payloads."""

from __future__ import annotations

from typing import Any

DEFAULT_BASE_URL = "https://api.openai.com/v1"

# Substrings identifying chat-capable models in the /models listing
CHAT_MODEL_MARKERS: tuple[str, ...] = ("gpt", "o1")


class OpenAIRequestBuilder:
    """Builds request headers and payloads for OpenAI API calls."""

    def __init__(self, api_key: str, *, organization: str | None = None) -> None:
        self._api_key = api_key
        self._organization = organization

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._organization:
            headers["OpenAI-Organization"] = self._organization
        return headers

    def build_request_body(
        self,
        model: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float | None = None,
        json_mode: bool = False,
    ) -> dict[str, Any]:
        """Build the request body for chat completions.

        ``json_mode`` asks for a ``json_object`` response; the prompt must
        mention JSON for the API to accept it.
        """
        body: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            body["temperature"] = temperature
        if json_mode:
            body["response_format"] = {"type": "json_object"}
        return body

    def get_redacted_headers(self, headers: dict[str, str]) -> dict[str, str]:
        """Return headers with sensitive values redacted."""
        redacted = dict(headers)
        if "Authorization" in redacted:
            redacted["Authorization"] = "Bearer [REDACTED]"
        return redacted


def extract_error_message(data: Any) -> str:
    """Extract error message from API response.

    OpenAI error format: {"error": {"message": "...", "type": "...", "code": "..."}}
    """
    if not isinstance(data, dict):
        return "Unknown API error"
    error = data.get("error", {})
    if isinstance(error, dict):
        return error.get("message", "Unknown API error")
    if isinstance(error, str):
        return error
    return "Unknown API error"


def extract_text(data: dict[str, Any]) -> str:
    """Return the first choice's message content."""
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else ""


def display_name(model_id: str) -> str:
    """Human-readable name for a model id: ``gpt-4o-mini`` -> ``GPT 4O MINI``."""
    return model_id.upper().replace("-", " ")


def is_chat_model(model_id: str) -> bool:
    return any(marker in model_id for marker in CHAT_MODEL_MARKERS)
