"""Data models for content extraction results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExtractionMethod(str, Enum):
    """Extraction tier that produced a result."""

    READER_MODE = "reader-mode"
    MOBILE_AGENT = "mobile-agent"
    DISK_STREAMED = "disk-streamed"
    URL_ONLY = "url-only"


class ExtractionMetadata(BaseModel):
    """Diagnostics collected while walking the extraction tiers."""

    model_config = ConfigDict(extra="forbid")

    attempts: int = Field(default=0, description="HTTP requests made across all tiers.")
    failed_methods: list[ExtractionMethod] = Field(
        default_factory=list, description="Tiers that produced no usable content."
    )
    elapsed_ms: int = Field(default=0, description="Wall time spent extracting, in milliseconds.")
    source_size: int | None = Field(
        default=None, description="Byte size of the response the text came from."
    )


class ExtractionResult(BaseModel):
    """Best-effort page content for a URL."""

    model_config = ConfigDict(extra="forbid")

    url: str = Field(description="URL the content was read from (a reader variant when one worked).")
    title: str = Field(description="Page title; never empty.")
    text: str = Field(description="Extracted, whitespace-collapsed page text.")
    description: str | None = Field(default=None, description="Meta description, when present.")
    method: ExtractionMethod = Field(description="Tier that produced the result.")
    metadata: ExtractionMetadata = Field(default_factory=ExtractionMetadata)
    error: str | None = Field(default=None, description="Set when extraction failed outright.")

    @property
    def content_length(self) -> int:
        return len(self.text)
