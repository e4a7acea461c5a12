"""Tests for the linkdigest-summarize command line tool."""

from __future__ import annotations

import json
import logging

import pytest

from linkdigest.cli import summarize as cli
from linkdigest.models.content_models import ExtractionMethod, ExtractionResult
from linkdigest.models.llm_models import SummaryResult

ARTICLE = "Event sourcing stores every state change as an immutable event. " * 8


class _StubExtractor:
    def __init__(self, config) -> None:
        self.config = config
        self.closed = False

    async def extract(self, url: str) -> ExtractionResult:
        return ExtractionResult(
            url=url, title="Event sourcing", text=ARTICLE, method=ExtractionMethod.MOBILE_AGENT
        )

    async def aclose(self) -> None:
        self.closed = True


class _StubProvider:
    name = "anthropic"

    async def summarize(self, text: str, url: str, title: str | None = None) -> SummaryResult:
        return SummaryResult(
            short_summary="Event sourcing in practice",
            long_summary="How event sourcing keeps an append-only log of state changes.",
            tags=["architecture"],
            category="Software",
            provider=self.name,
            confidence=0.8,
            quality_score=1.0,
            quality_issues=[],
        )

    def is_configured(self) -> bool:
        return True

    async def validate_config(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def stubbed_pipeline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-cli")
    monkeypatch.setenv("JOB_INTER_DELAY_SEC", "0")
    monkeypatch.setattr(cli, "ContentExtractor", _StubExtractor)
    monkeypatch.setattr(cli.ProviderFactory, "create", staticmethod(lambda config: _StubProvider()))


def test_parse_args() -> None:
    args = cli.parse_args(["https://a.test", "--provider", "claude", "--json", "--report"])

    assert args.urls == ["https://a.test"]
    assert args.provider == "claude"
    assert args.as_json is True
    assert args.report is True
    assert args.list_models is False


def test_list_models_requires_provider(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--list-models"]) == 2
    assert "--list-models requires --provider" in capsys.readouterr().err


def test_list_models_without_key(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--list-models", "--provider", "openai"]) == 1
    assert "No API key configured for provider: openai" in capsys.readouterr().err


def test_requires_urls(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 2
    assert "Provide at least one URL" in capsys.readouterr().err


def test_no_provider_configured(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "ContentExtractor", _StubExtractor)

    assert cli.main(["https://example.com/post"]) == 2
    assert "No summarization provider configured" in capsys.readouterr().err


@pytest.mark.usefixtures("stubbed_pipeline")
def test_summarizes_urls_as_json(capsys: pytest.CaptureFixture[str]) -> None:
    urls = ["https://example.com/a", "https://example.com/b", "https://example.com/a"]

    assert cli.main([*urls, "--json", "--report"]) == 0

    output = json.loads(capsys.readouterr().out)
    results = output["results"]
    assert [r["url"] for r in results] == ["https://example.com/a", "https://example.com/b"]
    assert all(r["status"] == "analyzed" for r in results)
    assert all(r["job_status"] == "completed" for r in results)
    assert results[0]["extraction_method"] == "mobile-agent"
    assert results[0]["provider"] == "anthropic"
    assert output["quality_report"]["total_analyzed"] == 2
    assert output["quality_report"]["high_quality"] == 2


@pytest.mark.usefixtures("stubbed_pipeline")
def test_summarizes_urls_as_text(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["https://example.com/a"]) == 0

    out = capsys.readouterr().out
    assert "https://example.com/a [analyzed]" in out
    assert "Event sourcing in practice" in out
    assert "tags: architecture" in out

