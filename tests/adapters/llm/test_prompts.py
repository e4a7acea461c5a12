"""Tests for prompt builders and response parsers."""

from __future__ import annotations

from linkdigest.adapters.llm.prompts import (
    DEFAULT_CATEGORY,
    DEFAULT_LONG_SUMMARY,
    DEFAULT_SHORT_SUMMARY,
    SUMMARY_INPUT_LIMIT,
    build_sufficiency_prompt,
    build_summary_prompt,
    error_summary_result,
    heuristic_sufficiency,
    parse_summary_response,
    parse_sufficiency_response,
)
from linkdigest.models.llm_models import SufficiencyAction


class TestPromptBuilders:
    def test_summary_prompt_includes_url_and_title(self) -> None:
        prompt = build_summary_prompt("Body text", "https://example.com/a", "A title")
        assert "URL: https://example.com/a" in prompt
        assert "Title: A title" in prompt
        assert '"shortSummary"' in prompt

    def test_summary_prompt_without_title(self) -> None:
        assert "Title: No title" in build_summary_prompt("Body", "https://e.com")

    def test_summary_prompt_truncates_content(self) -> None:
        prompt = build_summary_prompt("y" * (SUMMARY_INPUT_LIMIT + 500), "https://e.com")
        assert "y" * (SUMMARY_INPUT_LIMIT + 1) not in prompt

    def test_sufficiency_prompt_reports_full_length(self) -> None:
        prompt = build_sufficiency_prompt("z" * 3000, "https://e.com")
        assert "Content length: 3000 characters" in prompt
        assert "z" * 1001 not in prompt


class TestParseSummaryResponse:
    def test_fenced_json(self) -> None:
        raw = '```json\n{"shortSummary": "S", "longSummary": "L", "tags": ["a"], "category": "C"}\n```'
        fields = parse_summary_response(raw)
        assert fields == {"short_summary": "S", "long_summary": "L", "tags": ["a"], "category": "C"}

    def test_missing_keys_get_placeholders(self) -> None:
        fields = parse_summary_response('{"tags": ["one", "two", "three", "four", "five", "six"]}')
        assert fields["short_summary"] == DEFAULT_SHORT_SUMMARY
        assert fields["long_summary"] == DEFAULT_LONG_SUMMARY
        assert fields["category"] == DEFAULT_CATEGORY
        assert fields["tags"] == ["one", "two", "three", "four", "five"]

    def test_free_text(self) -> None:
        fields = parse_summary_response("First line\nSecond line")
        assert fields["short_summary"] == "First line"
        assert fields["long_summary"] == "First line\nSecond line"
        assert fields["tags"] == []

    def test_empty_response(self) -> None:
        fields = parse_summary_response(None)
        assert fields["short_summary"] == DEFAULT_SHORT_SUMMARY
        assert fields["long_summary"] == DEFAULT_LONG_SUMMARY


class TestSufficiency:
    def test_heuristic_thresholds(self) -> None:
        short = heuristic_sufficiency("x" * 150, None, confidence=0.6, reason="r")
        assert short.is_sufficient is False
        assert short.suggested_action == SufficiencyAction.FETCH_MORE

        medium = heuristic_sufficiency("x" * 300, None, confidence=0.6, reason="r")
        assert medium.is_sufficient is True
        assert medium.suggested_action == SufficiencyAction.FETCH_MORE

        long = heuristic_sufficiency("x" * 480, "a" * 30, confidence=0.6, reason="r")
        assert long.suggested_action == SufficiencyAction.USE_CURRENT

    def test_unparseable_response_uses_heuristic(self) -> None:
        result = parse_sufficiency_response("not json at all", "x" * 600, None)
        assert result.confidence == 0.5
        assert result.suggested_action == SufficiencyAction.USE_CURRENT

    def test_non_boolean_sufficient_is_false(self) -> None:
        result = parse_sufficiency_response(
            '{"isSufficient": "yes", "confidence": 0.9, "suggestedAction": "metadata_only"}',
            "text",
            None,
        )
        assert result.is_sufficient is False
        assert result.suggested_action == SufficiencyAction.METADATA_ONLY


def test_error_summary_result() -> None:
    result = error_summary_result("openai", "boom")
    assert result.error == "boom"
    assert result.quality_score == 0.0
    assert result.confidence == 0.0
    assert result.long_summary == "Failed to generate AI summary: boom"
