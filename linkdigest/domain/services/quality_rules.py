"""Rule table for the response quality assessor.

Each rule pairs a set of case-insensitive patterns with the issue recorded
and the penalty applied when any pattern matches.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from linkdigest.models.llm_models import IssueSeverity

ERROR_ACKNOWLEDGMENT = "error_acknowledgment"
GENERIC_RESPONSE = "generic_response"
INSUFFICIENT_CONTENT = "insufficient_content"
CONTENT_BLOCKED = "content_blocked"
INCOMPLETE_ANALYSIS = "incomplete_analysis"
LOW_CONFIDENCE = "low_confidence"


@dataclass(frozen=True)
class QualityRule:
    """A pattern-based check applied to a provider's summary."""

    issue_type: str
    severity: IssueSeverity
    description: str
    suggested_fix: str
    penalty: float
    patterns: tuple[str, ...]
    scan_content: bool = False
    _compiled: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        compiled = tuple(re.compile(p, re.IGNORECASE) for p in self.patterns)
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, summary_text: str, content: str) -> bool:
        """Return True when any pattern matches the summary (or the content, if scanned)."""
        for pattern in self._compiled:
            if pattern.search(summary_text):
                return True
            if self.scan_content and pattern.search(content):
                return True
        return False


@dataclass(frozen=True)
class QualityThresholds:
    min_short_summary_length: int = 20
    short_summary_penalty: float = 0.2
    min_long_summary_length: int = 50
    long_summary_penalty: float = 0.2
    min_confidence: float = 0.5
    low_confidence_penalty: float = 0.3
    high_quality_score: float = 0.7
    failed_score: float = 0.3
    metadata_only_score: float = 0.6


DEFAULT_RULES: tuple[QualityRule, ...] = (
    QualityRule(
        issue_type=ERROR_ACKNOWLEDGMENT,
        severity=IssueSeverity.HIGH,
        description="AI explicitly acknowledged inability to analyze content",
        suggested_fix="Try different scraping method or use metadata only",
        penalty=0.8,
        patterns=(
            r"I apologi[sz]e.*cannot",
            r"sorry.*unable to",
            r"I cannot.*provide",
            r"incomplete.*content.*provided",
            r"would need.*complete.*content",
            r"please.*share.*complete",
            r"without.*actual.*content",
            r"only contains.*elements",
        ),
    ),
    QualityRule(
        issue_type=GENERIC_RESPONSE,
        severity=IssueSeverity.MEDIUM,
        description="Response contains generic placeholder text",
        suggested_fix="Retry analysis with different scraping approach",
        penalty=0.4,
        patterns=(
            r"summary not available",
            r"detailed summary not available",
            r"unable to determine",
            r"not enough information",
            r"generic.*description",
        ),
    ),
    QualityRule(
        issue_type=INSUFFICIENT_CONTENT,
        severity=IssueSeverity.HIGH,
        description="Content appears to be mostly page infrastructure rather than meaningful content",
        suggested_fix="Use alternative scraping method or mark as low-priority",
        penalty=0.6,
        patterns=(
            r"google tag manager",
            r"iframe.*elements",
            r"javascript.*required",
            r"cookies.*policy",
            r"accept.*cookies",
            r"loading.*please.*wait",
        ),
        scan_content=True,
    ),
    QualityRule(
        issue_type=CONTENT_BLOCKED,
        severity=IssueSeverity.HIGH,
        description="Content appears to be behind authentication or paywall",
        suggested_fix="Use metadata only or mark as inaccessible",
        penalty=0.7,
        patterns=(
            r"access.*denied",
            r"permission.*required",
            r"sign.*in.*required",
            r"subscription.*required",
            r"paywall",
            r"403.*forbidden",
            r"404.*not.*found",
        ),
        scan_content=True,
    ),
)
