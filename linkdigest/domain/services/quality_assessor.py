"""Heuristic quality assessment of provider summaries.

This service is pure: the same summary, content and URL always produce the
same assessment. It has no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from linkdigest.domain.services.quality_rules import (
    CONTENT_BLOCKED,
    DEFAULT_RULES,
    ERROR_ACKNOWLEDGMENT,
    INCOMPLETE_ANALYSIS,
    INSUFFICIENT_CONTENT,
    LOW_CONFIDENCE,
    QualityRule,
    QualityThresholds,
)
from linkdigest.models.llm_models import (
    IssueSeverity,
    QualityAction,
    QualityAssessment,
    QualityIssue,
    SummaryResult,
)


class ResponseQualityAssessor:
    """Score a provider's summary and suggest what to do with it."""

    def __init__(
        self,
        rules: Sequence[QualityRule] = DEFAULT_RULES,
        thresholds: QualityThresholds | None = None,
    ) -> None:
        self._rules = tuple(rules)
        self._thresholds = thresholds or QualityThresholds()

    def assess(self, result: SummaryResult, original_text: str, url: str) -> QualityAssessment:
        """Assess ``result`` against the content it was generated from.

        Args:
            result: Provider output to inspect.
            original_text: Extracted page text the summary was generated from.
            url: Page URL. Not used by the current rules.

        Returns:
            The assessment with a score in [0, 1] rounded to 4 decimals.
        """
        issues: list[QualityIssue] = []
        score = 1.0

        short_summary = result.short_summary or ""
        long_summary = result.long_summary or ""
        combined = f"{short_summary.lower()} {long_summary.lower()}"
        content = original_text or ""

        for rule in self._rules:
            if rule.matches(combined, content):
                issues.append(
                    QualityIssue(
                        type=rule.issue_type,
                        severity=rule.severity,
                        description=rule.description,
                        suggested_fix=rule.suggested_fix,
                    )
                )
                score -= rule.penalty

        th = self._thresholds
        if short_summary and len(short_summary) < th.min_short_summary_length:
            issues.append(
                QualityIssue(
                    type=INCOMPLETE_ANALYSIS,
                    severity=IssueSeverity.MEDIUM,
                    description="Summary is unusually short",
                    suggested_fix="Verify content extraction quality",
                )
            )
            score -= th.short_summary_penalty

        if long_summary and len(long_summary) < th.min_long_summary_length:
            issues.append(
                QualityIssue(
                    type=INCOMPLETE_ANALYSIS,
                    severity=IssueSeverity.MEDIUM,
                    description="Detailed summary is unusually short",
                    suggested_fix="Check if content was properly extracted",
                )
            )
            score -= th.long_summary_penalty

        if result.confidence < th.min_confidence:
            issues.append(
                QualityIssue(
                    type=LOW_CONFIDENCE,
                    severity=IssueSeverity.MEDIUM,
                    description="AI provider reported low confidence in analysis",
                    suggested_fix="Consider retrying or using different provider",
                )
            )
            score -= th.low_confidence_penalty

        score = round(max(0.0, score), 4)

        return QualityAssessment(
            is_high_quality=score >= th.high_quality_score and not issues,
            quality_score=score,
            issues=issues,
            suggested_action=self.suggest_action(score, issues),
            confidence=score,
        )

    def suggest_action(self, score: float, issues: Iterable[QualityIssue]) -> QualityAction:
        """Map a score and its issues to a follow-up action.

        A refusal or a blocked page is always worth another scrape, even when
        the score alone would mark the summary as failed.
        """
        types = {issue.type for issue in issues}
        th = self._thresholds

        if ERROR_ACKNOWLEDGMENT in types or CONTENT_BLOCKED in types:
            return QualityAction.RETRY_DIFFERENT_SCRAPING
        if score < th.failed_score:
            return QualityAction.MARK_AS_FAILED
        if INSUFFICIENT_CONTENT in types:
            return QualityAction.RETRY_DIFFERENT_SCRAPING
        if score < th.metadata_only_score:
            return QualityAction.USE_METADATA_ONLY
        return QualityAction.ACCEPT


_default_assessor = ResponseQualityAssessor()


def assess_response_quality(
    result: SummaryResult, original_text: str, url: str
) -> QualityAssessment:
    """Assess ``result`` with the default rule table."""
    return _default_assessor.assess(result, original_text, url)
