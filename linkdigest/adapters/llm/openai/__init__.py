"""OpenAI provider adapter."""

from linkdigest.adapters.llm.openai.provider import OpenAIProvider
from linkdigest.adapters.llm.openai.request_builder import OpenAIRequestBuilder

__all__ = ["OpenAIProvider", "OpenAIRequestBuilder"]
