"""Quality reporting over summarized bookmarks."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from linkdigest.domain.exceptions.domain_exceptions import ResourceNotFoundError
from linkdigest.domain.models.bookmark import BookmarkStatus, cleared_summary_fields
from linkdigest.models.quality_models import (
    BookmarkQualityStats,
    IssueCount,
    ProviderPerformance,
    QualityReport,
    QualityTrend,
)

if TYPE_CHECKING:
    from linkdigest.domain.models.bookmark import Bookmark
    from linkdigest.protocols import BookmarkStore

logger = logging.getLogger(__name__)

HIGH_QUALITY_THRESHOLD = 0.7
MEDIUM_QUALITY_THRESHOLD = 0.4
COMMON_ISSUE_LIMIT = 10
TREND_WINDOW_DAYS = 30


class QualityReportService:
    """Reads quality scores off the bookmark store and resets weak summaries.

    Only bookmarks carrying a quality score take part in the statistics.
    """

    def __init__(self, bookmark_store: BookmarkStore) -> None:
        self._bookmarks = bookmark_store

    async def _scored_bookmarks(self) -> list[Bookmark]:
        return [b for b in await self._bookmarks.list() if b.quality_score is not None]

    async def get_quality_report(self) -> QualityReport:
        scored = await self._scored_bookmarks()
        if not scored:
            return QualityReport()

        scores = [b.quality_score for b in scored]
        issues: Counter[str] = Counter()
        by_provider: dict[str, list[float]] = defaultdict(list)
        for bookmark in scored:
            issues.update(bookmark.quality_issues)
            by_provider[bookmark.ai_provider or "unknown"].append(bookmark.quality_score)

        performance = [
            ProviderPerformance(
                provider=provider,
                average_score=round(sum(values) / len(values), 4),
                count=len(values),
            )
            for provider, values in by_provider.items()
        ]
        performance.sort(key=lambda item: item.average_score, reverse=True)

        return QualityReport(
            total_analyzed=len(scored),
            high_quality=sum(1 for s in scores if s >= HIGH_QUALITY_THRESHOLD),
            medium_quality=sum(
                1 for s in scores if MEDIUM_QUALITY_THRESHOLD <= s < HIGH_QUALITY_THRESHOLD
            ),
            low_quality=sum(1 for s in scores if s < MEDIUM_QUALITY_THRESHOLD),
            average_score=round(sum(scores) / len(scores), 4),
            common_issues=[
                IssueCount(issue=issue, count=count)
                for issue, count in issues.most_common(COMMON_ISSUE_LIMIT)
            ],
            provider_performance=performance,
        )

    async def get_low_quality_bookmarks(self, limit: int = 50) -> list[BookmarkQualityStats]:
        """Bookmarks scoring below 0.7, worst first."""
        if limit <= 0:
            msg = "limit must be positive"
            raise ValueError(msg)

        weak = [
            b for b in await self._scored_bookmarks() if b.quality_score < HIGH_QUALITY_THRESHOLD
        ]
        # Most recently updated first among equal scores
        weak.sort(key=lambda b: b.updated_at, reverse=True)
        weak.sort(key=lambda b: b.quality_score)
        return [
            BookmarkQualityStats(
                id=b.id,
                title=b.title,
                url=b.url,
                quality_score=b.quality_score,
                quality_issues=list(b.quality_issues),
                provider=b.ai_provider,
            )
            for b in weak[:limit]
        ]

    async def get_quality_trends(
        self, days: int = 7, *, now: datetime | None = None
    ) -> list[QualityTrend]:
        """Per-day average score over the trailing 30 days, newest day first.

        At most ``days`` entries are returned; days without scored bookmarks
        are omitted.
        """
        if days <= 0:
            msg = "days must be positive"
            raise ValueError(msg)

        cutoff = (now or datetime.now(UTC)) - timedelta(days=TREND_WINDOW_DAYS)
        by_day: dict[date, list[float]] = defaultdict(list)
        for bookmark in await self._scored_bookmarks():
            if bookmark.updated_at >= cutoff:
                by_day[bookmark.updated_at.date()].append(bookmark.quality_score)

        return [
            QualityTrend(
                date=day,
                average_score=round(sum(values) / len(values), 4),
                count=len(values),
            )
            for day, values in sorted(by_day.items(), reverse=True)[:days]
        ]

    async def mark_for_reprocessing(
        self, bookmark_ids: Iterable[str], reason: str = "Quality improvement retry"
    ) -> int:
        """Clear the summary group of each bookmark and reset it to pending.

        Returns:
            Number of bookmarks reset; unknown IDs are skipped.
        """
        reset = 0
        for bookmark_id in bookmark_ids:
            fields = cleared_summary_fields()
            fields["status"] = BookmarkStatus.PENDING
            try:
                await self._bookmarks.update(bookmark_id, fields)
            except ResourceNotFoundError:
                logger.debug("reprocessing_bookmark_missing", extra={"bookmark_id": bookmark_id})
                continue
            reset += 1

        logger.info("bookmarks_marked_for_reprocessing", extra={"count": reset, "reason": reason})
        return reset
