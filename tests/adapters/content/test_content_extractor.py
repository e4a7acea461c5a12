"""Tests for the tiered content extractor."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path

import httpx
import pytest

from linkdigest.adapters.content import ContentExtractor
from linkdigest.config import ContentExtractionConfig
from linkdigest.core.url_utils import describe_url
from linkdigest.models.content_models import ExtractionMethod

URL = "https://example.com/article"

ARTICLE_TEXT = (
    "Python's asyncio library lets a single thread juggle many network connections. "
    "This article walks through event loops, tasks and cancellation, then shows how "
    "to structure a crawler so that slow servers never block fast ones. "
)

RICH_PAGE = f"""
<html><head><title>Async Python</title>
<meta name="description" content="A tour of asyncio"></head>
<body><main><article><p>{ARTICLE_TEXT * 3}</p></article></main></body></html>
"""

Handler = Callable[[httpx.Request], httpx.Response]


def _extractor(tmp_path: Path, handler: Handler, **overrides: object) -> ContentExtractor:
    config = ContentExtractionConfig(temp_dir=str(tmp_path), **overrides)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ContentExtractor(config, client=client)


def _is_variant(request: httpx.Request) -> bool:
    return bool(request.url.query) or request.url.path.startswith("/amp")


def _is_mobile(request: httpx.Request) -> bool:
    return "iPhone" in request.headers.get("user-agent", "")


def _html(content: str) -> httpx.Response:
    return httpx.Response(200, text=content, headers={"content-type": "text/html; charset=utf-8"})


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield b"<html><head><title>Partial"
        raise httpx.ReadError("connection reset")


@pytest.mark.asyncio
async def test_reader_mode_short_circuits(tmp_path: Path) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if request.url.params.get("reader") == "true":
            return _html(RICH_PAGE)
        return httpx.Response(404)

    extractor = _extractor(tmp_path, handler)
    result = await extractor.extract(URL)

    assert result.method == ExtractionMethod.READER_MODE
    assert result.url == f"{URL}?reader=true"
    assert result.title == "Async Python"
    assert result.description == "A tour of asyncio"
    assert "event loops" in result.text
    assert result.metadata.attempts == 1
    assert result.metadata.failed_methods == []
    assert result.metadata.source_size and result.metadata.source_size > 0
    assert seen == [f"{URL}?reader=true"]
    await extractor.aclose()


@pytest.mark.asyncio
async def test_mobile_agent_after_reader_mode_fails(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if _is_variant(request):
            return httpx.Response(404)
        if _is_mobile(request):
            return _html(RICH_PAGE)
        return httpx.Response(500)

    extractor = _extractor(tmp_path, handler)
    result = await extractor.extract(URL)

    assert result.method == ExtractionMethod.MOBILE_AGENT
    assert result.url == URL
    assert result.metadata.failed_methods == [ExtractionMethod.READER_MODE]
    assert result.metadata.attempts == 9


@pytest.mark.asyncio
async def test_short_reader_page_is_not_usable(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if _is_variant(request):
            return _html("<html><head><title>Thin</title></head><body>Too short</body></html>")
        if _is_mobile(request):
            return _html(RICH_PAGE)
        return httpx.Response(404)

    result = await _extractor(tmp_path, handler).extract(URL)

    assert result.method == ExtractionMethod.MOBILE_AGENT


@pytest.mark.asyncio
async def test_disk_streamed_tier_and_temp_file_removed(tmp_path: Path) -> None:
    page = "<html><body><main><p>Only the full download works here.</p></main></body></html>"

    def handler(request: httpx.Request) -> httpx.Response:
        if _is_variant(request) or _is_mobile(request):
            return httpx.Response(403)
        return _html(page)

    result = await _extractor(tmp_path, handler).extract(URL)

    assert result.method == ExtractionMethod.DISK_STREAMED
    assert result.text == "Only the full download works here."
    # No <title>, so the title comes from the URL
    assert result.title == describe_url(URL)[0]
    assert result.metadata.failed_methods == [
        ExtractionMethod.READER_MODE,
        ExtractionMethod.MOBILE_AGENT,
    ]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_temp_file_removed_when_download_breaks(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if _is_variant(request) or _is_mobile(request):
            return httpx.Response(404)
        return httpx.Response(200, stream=_BrokenStream())

    result = await _extractor(tmp_path, handler).extract(URL)

    assert result.method == ExtractionMethod.URL_ONLY
    assert ExtractionMethod.DISK_STREAMED in result.metadata.failed_methods
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_temp_file_removed_when_reading_download_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    existed_while_reading: list[bool] = []

    def failing_read(self: ContentExtractor, path: Path, encoding: str | None) -> str:
        existed_while_reading.append(path.exists())
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    def handler(request: httpx.Request) -> httpx.Response:
        if _is_variant(request) or _is_mobile(request):
            return httpx.Response(404)
        return _html(RICH_PAGE)

    monkeypatch.setattr(ContentExtractor, "_read_ahead", failing_read)

    result = await _extractor(tmp_path, handler).extract(URL)

    assert result.method == ExtractionMethod.URL_ONLY
    assert ExtractionMethod.DISK_STREAMED in result.metadata.failed_methods
    assert existed_while_reading == [True]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_all_timeouts_fall_back_to_url_only(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = await _extractor(tmp_path, handler).extract(URL)

    title, text = describe_url(URL)
    assert result.method == ExtractionMethod.URL_ONLY
    assert result.title == title
    assert result.text == text
    assert result.error is None
    assert result.metadata.failed_methods == [
        ExtractionMethod.READER_MODE,
        ExtractionMethod.MOBILE_AGENT,
        ExtractionMethod.DISK_STREAMED,
    ]
    assert result.metadata.attempts == 10
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_oversized_quick_response_is_skipped(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("reader") == "true":
            return _html(RICH_PAGE + "<!--" + "x" * 4096 + "-->")
        if request.url.params.get("text") == "true":
            return _html(RICH_PAGE)
        return httpx.Response(404)

    result = await _extractor(tmp_path, handler, quick_analysis_limit_bytes=2048).extract(URL)

    assert result.method == ExtractionMethod.READER_MODE
    assert result.url == f"{URL}?text=true"


@pytest.mark.asyncio
async def test_empty_url(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never called
        raise AssertionError("no request expected")

    result = await _extractor(tmp_path, handler).extract("")

    assert result.method == ExtractionMethod.URL_ONLY
    assert result.error == "URL is empty"
    assert result.title
    assert result.text


@pytest.mark.asyncio
async def test_non_http_url_skips_network(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never called
        raise AssertionError("no request expected")

    result = await _extractor(tmp_path, handler).extract("ftp://files.example.com/report-2024")

    assert result.method == ExtractionMethod.URL_ONLY
    assert result.metadata.attempts == 0
    assert result.title == "report 2024"
    assert result.text == "Content from files.example.com: report 2024"


@pytest.mark.asyncio
async def test_check_url(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "HEAD"
        if request.url.path == "/ok":
            return httpx.Response(200)
        if request.url.path == "/down":
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(404)

    extractor = _extractor(tmp_path, handler)

    assert await extractor.check_url("https://example.com/ok") is True
    assert await extractor.check_url("https://example.com/missing") is False
    assert await extractor.check_url("https://example.com/down") is False
