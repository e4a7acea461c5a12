"""Summarization provider protocol defining the common interface for all backends.

Every provider (Anthropic, OpenAI) implements this protocol so the
orchestrator can use them interchangeably.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from linkdigest.models.llm_models import SufficiencyResult, SummaryResult


@runtime_checkable
class SummarizationProvider(Protocol):
    """Protocol defining the interface for summarization providers.

    Implementations never raise from ``summarize`` or
    ``assess_content_sufficiency``; failures come back inside the result.
    ``list_models(api_key)`` is a static coroutine on each implementation.
    """

    @property
    def name(self) -> str:
        """Return the provider identifier ("anthropic", "openai")."""
        ...

    async def summarize(self, text: str, url: str, title: str | None = None) -> SummaryResult:
        """Summarize extracted page text.

        Args:
            text: Extracted page text.
            url: Page URL, included in the prompt.
            title: Optional page title.

        Returns:
            SummaryResult with quality score and issues, or with ``error`` set.
        """
        ...

    async def assess_content_sufficiency(
        self, text: str, url: str, title: str | None = None
    ) -> SufficiencyResult:
        """Judge whether ``text`` is enough for a meaningful summary."""
        ...

    def is_configured(self) -> bool:
        """Return True when credentials are present."""
        ...

    async def validate_config(self) -> bool:
        """Check credentials against the live backend; False on any failure."""
        ...

    async def aclose(self) -> None:
        """Close the provider and release HTTP resources."""
        ...
