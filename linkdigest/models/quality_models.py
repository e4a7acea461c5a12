"""Data models for summary quality reporting."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class IssueCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    issue: str
    count: int


class ProviderPerformance(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str
    average_score: float
    count: int


class QualityReport(BaseModel):
    """Aggregate quality statistics over scored bookmarks."""

    model_config = ConfigDict(extra="forbid")

    total_analyzed: int = 0
    high_quality: int = Field(default=0, description="Bookmarks scoring at least 0.7.")
    medium_quality: int = Field(default=0, description="Bookmarks scoring from 0.4 up to 0.7.")
    low_quality: int = Field(default=0, description="Bookmarks scoring below 0.4.")
    average_score: float = 0.0
    common_issues: list[IssueCount] = Field(default_factory=list)
    provider_performance: list[ProviderPerformance] = Field(default_factory=list)


class BookmarkQualityStats(BaseModel):
    """Quality details of a single scored bookmark."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    url: str
    quality_score: float
    quality_issues: list[str] = Field(default_factory=list)
    provider: str | None = None


class QualityTrend(BaseModel):
    """Average quality score of the bookmarks summarized on one day."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    average_score: float
    count: int
