"""Prompt templates and response parsers shared by every provider."""

from __future__ import annotations

import logging
from typing import Any

from linkdigest.core.html_utils import first_line, truncate_text
from linkdigest.core.json_utils import coerce_str_list, extract_json
from linkdigest.domain.services.quality_assessor import assess_response_quality
from linkdigest.models.llm_models import SufficiencyAction, SufficiencyResult, SummaryResult

logger = logging.getLogger(__name__)

SUMMARY_INPUT_LIMIT = 8000
SUFFICIENCY_PREVIEW_LIMIT = 1000
SUFFICIENCY_MAX_TOKENS = 200
SUFFICIENCY_TEMPERATURE = 0.3
MAX_TAGS = 5
SHORT_SUMMARY_LIMIT = 150
RAW_LONG_SUMMARY_LIMIT = 1000
INITIAL_CONFIDENCE = 0.8

DEFAULT_SHORT_SUMMARY = "AI summary not available"
DEFAULT_LONG_SUMMARY = "Detailed summary not available"
DEFAULT_CATEGORY = "Uncategorized"

VALIDATION_PROMPT = "Hello, this is a test message to validate the API configuration."


def build_summary_prompt(text: str, url: str, title: str | None = None) -> str:
    content = truncate_text(text or "", SUMMARY_INPUT_LIMIT, suffix="...")
    return f"""Please analyze the following web page content and provide:
1. A one-line summary (max 150 characters)
2. A detailed summary (2-3 paragraphs)
3. Up to 5 relevant tags
4. A category classification

URL: {url}
Title: {title or "No title"}

Content:
{content}

Please respond in JSON format:
{{
  "shortSummary": "Brief one-line summary",
  "longSummary": "Detailed multi-paragraph summary",
  "tags": ["tag1", "tag2", "tag3"],
  "category": "category name"
}}"""


def build_sufficiency_prompt(text: str, url: str, title: str | None = None) -> str:
    preview = truncate_text(text or "", SUFFICIENCY_PREVIEW_LIMIT, suffix="...")
    return f"""Please assess if the following content is sufficient for generating a meaningful bookmark summary and categorization.

URL: {url}
Title: {title or "No title"}
Content length: {len(text or "")} characters

Content preview:
{preview}

Please respond in JSON format:
{{
  "isSufficient": boolean,
  "confidence": number (0-1),
  "reason": "explanation of assessment",
  "suggestedAction": "use_current" | "fetch_more" | "metadata_only"
}}

Consider:
- Is there enough meaningful text content for categorization?
- Can we understand what this page is about from the available content?
- Would fetching more content significantly improve analysis quality?"""


def _str_field(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def parse_summary_response(raw: str | None) -> dict[str, Any]:
    """Turn a provider's raw text into the summary field group.

    Missing keys get placeholders; a body with no recoverable JSON object is
    used as free text.
    """
    raw = raw or ""
    data = extract_json(raw)
    if data is None:
        logger.debug("summary_response_not_json", extra={"response_length": len(raw)})
        return {
            "short_summary": first_line(raw, SHORT_SUMMARY_LIMIT) or DEFAULT_SHORT_SUMMARY,
            "long_summary": raw[:RAW_LONG_SUMMARY_LIMIT].strip() or DEFAULT_LONG_SUMMARY,
            "tags": [],
            "category": DEFAULT_CATEGORY,
        }

    return {
        "short_summary": _str_field(data, "shortSummary", DEFAULT_SHORT_SUMMARY),
        "long_summary": _str_field(data, "longSummary", DEFAULT_LONG_SUMMARY),
        "tags": coerce_str_list(data.get("tags"), limit=MAX_TAGS),
        "category": _str_field(data, "category", DEFAULT_CATEGORY),
    }


def heuristic_sufficiency(
    text: str,
    title: str | None,
    *,
    confidence: float,
    reason: str,
) -> SufficiencyResult:
    """Judge sufficiency by length alone."""
    total_length = len(text or "") + len(title or "")
    return SufficiencyResult(
        is_sufficient=total_length > 200,
        confidence=confidence,
        reason=reason,
        suggested_action=(
            SufficiencyAction.USE_CURRENT if total_length > 500 else SufficiencyAction.FETCH_MORE
        ),
    )


def parse_sufficiency_response(raw: str | None, text: str, title: str | None) -> SufficiencyResult:
    data = extract_json(raw)
    if data is None:
        return heuristic_sufficiency(
            text, title, confidence=0.5, reason="Fallback assessment based on content length"
        )

    try:
        action = SufficiencyAction(str(data.get("suggestedAction") or ""))
    except ValueError:
        action = SufficiencyAction.FETCH_MORE

    reason = data.get("reason")
    return SufficiencyResult(
        is_sufficient=data.get("isSufficient") is True,
        confidence=data.get("confidence") or 0,
        reason=reason if isinstance(reason, str) and reason else "No assessment reason provided",
        suggested_action=action,
    )


def build_summary_result(
    raw: str | None, *, provider: str, original_text: str, url: str
) -> SummaryResult:
    """Parse a raw completion and attach its quality assessment."""
    fields = parse_summary_response(raw)
    result = SummaryResult(**fields, provider=provider, confidence=INITIAL_CONFIDENCE)

    assessment = assess_response_quality(result, original_text, url)
    if assessment.issues:
        logger.info(
            "summary_quality_issues",
            extra={
                "provider": provider,
                "url": url,
                "quality_score": assessment.quality_score,
                "issues": [issue.type for issue in assessment.issues],
                "suggested_action": assessment.suggested_action.value,
            },
        )

    return result.model_copy(
        update={
            "quality_score": assessment.quality_score,
            "quality_issues": [issue.format() for issue in assessment.issues],
            "confidence": min(INITIAL_CONFIDENCE, assessment.confidence),
        }
    )


def error_summary_result(provider: str, error: str) -> SummaryResult:
    return SummaryResult(
        short_summary="Error processing content",
        long_summary=f"Failed to generate AI summary: {error}",
        tags=[],
        category=DEFAULT_CATEGORY,
        provider=provider,
        confidence=0.0,
        quality_score=0.0,
        quality_issues=["Processing failed"],
        error=error,
    )
