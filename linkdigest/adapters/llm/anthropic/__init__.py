"""Anthropic provider adapter."""

from linkdigest.adapters.llm.anthropic.provider import AnthropicProvider
from linkdigest.adapters.llm.anthropic.request_builder import AnthropicRequestBuilder

__all__ = ["AnthropicProvider", "AnthropicRequestBuilder"]
