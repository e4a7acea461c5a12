"""Bookmark domain model.

A Bookmark is a saved link owned by the ingestion side of the system. The
summarization pipeline only reads it and writes back its summary group.
"""

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class BookmarkStatus(str, Enum):
    """Processing status of a bookmark."""

    PENDING = "pending"
    PROCESSING = "processing"
    ANALYZED = "analyzed"
    FAILED = "failed"


# Written together or not at all
SUMMARY_FIELDS: frozenset[str] = frozenset(
    {
        "short_summary",
        "long_summary",
        "tags",
        "category",
        "ai_provider",
        "quality_score",
        "quality_issues",
    }
)

EXTRACTION_FIELDS: frozenset[str] = frozenset(
    {"extracted_content", "extraction_method", "extraction_metadata"}
)


@dataclass
class Bookmark:
    """Domain model for a saved link and its generated summary."""

    id: str
    url: str
    title: str = ""
    folder_path: str = ""
    status: BookmarkStatus = BookmarkStatus.PENDING
    short_summary: str | None = None
    long_summary: str | None = None
    tags: list[str] = field(default_factory=list)
    category: str | None = None
    ai_provider: str | None = None
    quality_score: float | None = None
    quality_issues: list[str] = field(default_factory=list)
    extracted_content: str | None = None
    extraction_method: str | None = None
    extraction_metadata: dict[str, Any] | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def writable_fields(cls) -> frozenset[str]:
        """Names of the fields a store update may touch."""
        return frozenset(f.name for f in fields(cls) if f.name != "id")

    def is_analyzed(self) -> bool:
        return self.status == BookmarkStatus.ANALYZED

    def has_summary(self) -> bool:
        """Check whether a summary group has been written."""
        return bool(self.short_summary) and self.ai_provider is not None


def cleared_summary_fields() -> dict[str, Any]:
    """Field values that reset the summary group to its unanalyzed state."""
    return {
        "short_summary": None,
        "long_summary": None,
        "tags": [],
        "category": None,
        "ai_provider": None,
        "quality_score": None,
        "quality_issues": [],
    }
