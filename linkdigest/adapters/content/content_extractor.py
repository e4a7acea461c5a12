"""Tiered, best-effort text extraction for arbitrary URLs.

Cheap strategies run before expensive ones:

1. reader-mode URL variants with desktop headers and a small byte budget;
2. the original URL with a mobile user agent and the same budget;
3. a full download streamed to a temporary file, read back partially;
4. a description derived from the URL alone, without network access.

``extract`` never raises for network or content errors.
"""

from __future__ import annotations

import logging
import tempfile
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import NamedTuple

import httpx

from linkdigest.adapters.content.html_content import PageContent, parse_page
from linkdigest.config.content import ContentExtractionConfig
from linkdigest.core.async_utils import raise_if_cancelled
from linkdigest.core.http_utils import ResponseSizeError, decode_body, read_limited_body
from linkdigest.core.url_utils import build_variant_url, describe_url, is_http_url, url_hash_md5
from linkdigest.models.content_models import (
    ExtractionMetadata,
    ExtractionMethod,
    ExtractionResult,
)

logger = logging.getLogger(__name__)

DESKTOP_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
}

MOBILE_HEADERS: dict[str, str] = {
    **DESKTOP_HEADERS,
    "User-Agent": (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) "
        "Version/17.0 Mobile/15E148 Safari/604.1"
    ),
}

READER_MODE_VARIANTS: tuple[str, ...] = (
    "?reader=true",
    "?text=true",
    "?print=true",
    "?mobile=true",
    "?amp=1",
    "/amp",
    "?view=reader",
    "?format=text",
)

_TITLE_MARKER = b"<title"
_DESCRIPTION_MARKERS = (b'name="description"', b'property="og:description"')
_MAIN_MARKERS = (b"<main", b"<article", b"<body")
_READ_CHUNK_BYTES = 16 * 1024
_SERVICE_NAME = "content_extractor"


class _TierHit(NamedTuple):
    url: str
    page: PageContent
    source_size: int | None


@dataclass
class _ExtractionState:
    attempts: int = 0
    failed_methods: list[ExtractionMethod] = field(default_factory=list)


class ContentExtractor:
    """Extracts page text through progressively more expensive strategies."""

    def __init__(
        self,
        config: ContentExtractionConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or ContentExtractionConfig()
        self._client = client
        self._owns_client = client is None
        if self._config.temp_dir:
            self._temp_dir = Path(self._config.temp_dir)
        else:
            self._temp_dir = Path(tempfile.gettempdir()) / "linkdigest"

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this extractor created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ContentExtractor:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def extract(self, url: str) -> ExtractionResult:
        """Return the best content this extractor can find for ``url``."""
        started = time.perf_counter()
        state = _ExtractionState()

        if not url or not url.strip():
            title, text = describe_url(url or "")
            return ExtractionResult(
                url=url or "",
                title=title,
                text=text,
                method=ExtractionMethod.URL_ONLY,
                metadata=self._metadata(state, started, None),
                error="URL is empty",
            )

        if is_http_url(url):
            tiers = (
                (ExtractionMethod.READER_MODE, self._try_reader_mode),
                (ExtractionMethod.MOBILE_AGENT, self._try_mobile_agent),
                (ExtractionMethod.DISK_STREAMED, self._try_disk_streamed),
            )
            for method, tier in tiers:
                try:
                    hit = await tier(url, state)
                except Exception as exc:
                    raise_if_cancelled(exc)
                    logger.warning(
                        "extraction_tier_error",
                        extra={"url": url, "method": method.value, "error": str(exc)},
                    )
                    hit = None
                if hit is not None:
                    logger.info(
                        "extraction_succeeded",
                        extra={
                            "url": url,
                            "method": method.value,
                            "content_length": len(hit.page.text),
                            "attempts": state.attempts,
                        },
                    )
                    return ExtractionResult(
                        url=hit.url,
                        title=hit.page.title,
                        text=hit.page.text,
                        description=hit.page.description,
                        method=method,
                        metadata=self._metadata(state, started, hit.source_size),
                    )
                state.failed_methods.append(method)
        else:
            logger.warning("extraction_non_http_url", extra={"url": url})

        hit = self._url_only_result(url)
        logger.info(
            "extraction_url_only_fallback",
            extra={"url": url, "failed_methods": [m.value for m in state.failed_methods]},
        )
        return ExtractionResult(
            url=hit.url,
            title=hit.page.title,
            text=hit.page.text,
            method=ExtractionMethod.URL_ONLY,
            metadata=self._metadata(state, started, None),
        )

    async def check_url(self, url: str) -> bool:
        """HEAD the URL and report whether it answered with a non-error status."""
        try:
            response = await self._get_client().head(
                url, headers=DESKTOP_HEADERS, timeout=self._config.quick_timeout_sec
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("check_url_failed", extra={"url": url, "error": str(exc)})
            return False
        return response.status_code < 400

    def _is_usable(self, page: PageContent) -> bool:
        return bool(page.title) and len(page.text) > self._config.min_content_length

    async def _fetch_limited(
        self, url: str, headers: dict[str, str], state: _ExtractionState
    ) -> tuple[str, int] | None:
        """GET ``url`` within the quick byte and time budget; None on any failure."""
        state.attempts += 1
        limit = self._config.quick_analysis_limit_bytes
        try:
            async with self._get_client().stream(
                "GET", url, headers=headers, timeout=self._config.quick_timeout_sec
            ) as response:
                if response.status_code != 200:
                    logger.debug(
                        "extraction_fetch_status",
                        extra={"url": url, "status_code": response.status_code},
                    )
                    return None
                body = await read_limited_body(response, limit, _SERVICE_NAME)
                return decode_body(body, response.charset_encoding), len(body)
        except ResponseSizeError as exc:
            logger.debug(
                "extraction_fetch_too_large",
                extra={"url": url, "actual_size": exc.actual_size, "max_size": exc.max_size},
            )
        except httpx.HTTPError as exc:
            logger.debug("extraction_fetch_failed", extra={"url": url, "error": str(exc)})
        return None

    async def _try_reader_mode(self, url: str, state: _ExtractionState) -> _TierHit | None:
        for variant in READER_MODE_VARIANTS:
            reader_url = build_variant_url(url, variant)
            if reader_url is None:
                continue
            fetched = await self._fetch_limited(reader_url, DESKTOP_HEADERS, state)
            if fetched is None:
                continue
            html, size = fetched
            page = parse_page(html, self._config.max_text_length)
            if self._is_usable(page):
                return _TierHit(reader_url, page, size)
        return None

    async def _try_mobile_agent(self, url: str, state: _ExtractionState) -> _TierHit | None:
        fetched = await self._fetch_limited(url, MOBILE_HEADERS, state)
        if fetched is None:
            return None
        html, size = fetched
        page = parse_page(html, self._config.max_text_length)
        return _TierHit(url, page, size) if self._is_usable(page) else None

    async def _try_disk_streamed(self, url: str, state: _ExtractionState) -> _TierHit | None:
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        temp_path = self._temp_dir / f"content-{url_hash_md5(url)}.html"
        state.attempts += 1
        try:
            try:
                async with self._get_client().stream(
                    "GET", url, headers=DESKTOP_HEADERS, timeout=self._config.disk_timeout_sec
                ) as response:
                    response.raise_for_status()
                    encoding = response.charset_encoding
                    size = 0
                    with temp_path.open("wb") as fh:
                        async for chunk in response.aiter_bytes():
                            fh.write(chunk)
                            size += len(chunk)
            except httpx.HTTPError as exc:
                logger.info("disk_download_failed", extra={"url": url, "error": str(exc)})
                return None

            html = self._read_ahead(temp_path, encoding)
        finally:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning(
                    "temp_file_cleanup_failed", extra={"path": str(temp_path), "error": str(exc)}
                )

        page = parse_page(html, self._config.max_text_length)
        if not page.text:
            return None
        if not page.title:
            page = replace(page, title=describe_url(url)[0])
        return _TierHit(url, page, size)

    def _read_ahead(self, path: Path, encoding: str | None) -> str:
        """Read the head of a downloaded page.

        Stops once a title, a meta description and a main-content marker have
        been seen and the read-ahead window is filled, or at the ceiling.
        """
        read_ahead = self._config.disk_read_ahead_bytes
        ceiling = self._config.disk_read_ceiling_bytes
        buf = bytearray()
        with path.open("rb") as fh:
            while len(buf) < ceiling:
                chunk = fh.read(min(_READ_CHUNK_BYTES, ceiling - len(buf)))
                if not chunk:
                    break
                buf.extend(chunk)
                if len(buf) >= read_ahead and _has_page_markers(bytes(buf).lower()):
                    break
        return decode_body(bytes(buf), encoding)

    def _url_only_result(self, url: str) -> _TierHit:
        title, text = describe_url(url)
        return _TierHit(url, PageContent(title=title, text=text), None)

    @staticmethod
    def _metadata(
        state: _ExtractionState, started: float, source_size: int | None
    ) -> ExtractionMetadata:
        return ExtractionMetadata(
            attempts=state.attempts,
            failed_methods=list(state.failed_methods),
            elapsed_ms=int((time.perf_counter() - started) * 1000),
            source_size=source_size,
        )


def _has_page_markers(lowered: bytes) -> bool:
    return (
        _TITLE_MARKER in lowered
        and any(marker in lowered for marker in _DESCRIPTION_MARKERS)
        and any(marker in lowered for marker in _MAIN_MARKERS)
    )
