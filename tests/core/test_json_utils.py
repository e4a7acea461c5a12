"""Tests for lenient JSON extraction from model output."""

from __future__ import annotations

from linkdigest.core.json_utils import coerce_str_list, extract_json


class TestExtractJson:
    def test_plain_object(self) -> None:
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_object(self) -> None:
        text = 'Here you go:\n```json\n{"shortSummary": "Hi"}\n```\nThanks'
        assert extract_json(text) == {"shortSummary": "Hi"}

    def test_object_inside_prose(self) -> None:
        text = 'Sure! {"category": "Tech", "tags": ["a"]} Let me know.'
        assert extract_json(text) == {"category": "Tech", "tags": ["a"]}

    def test_trailing_comma(self) -> None:
        assert extract_json('{"a": 1, "b": [1, 2,],}') == {"a": 1, "b": [1, 2]}

    def test_missing_closing_brace(self) -> None:
        assert extract_json('{"a": {"b": 2}') == {"a": {"b": 2}}

    def test_no_object(self) -> None:
        assert extract_json("no json here") is None
        assert extract_json("") is None
        assert extract_json(None) is None
        assert extract_json("[1, 2]") is None


class TestCoerceStrList:
    def test_list_deduplicates_case_insensitively(self) -> None:
        assert coerce_str_list(["Python", "python", " AI ", ""]) == ["Python", "AI"]

    def test_comma_separated_string(self) -> None:
        assert coerce_str_list("web, api ,  , web") == ["web", "api"]

    def test_limit(self) -> None:
        assert coerce_str_list(["a", "b", "c", "d"], limit=2) == ["a", "b"]

    def test_invalid_values(self) -> None:
        assert coerce_str_list(None) == []
        assert coerce_str_list(42) == []
        assert coerce_str_list([{"x": 1}, ["y"], None, "z"]) == ["z"]
