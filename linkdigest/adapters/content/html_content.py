"""Readable-content selection from raw HTML."""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from linkdigest.core.html_utils import collapse_whitespace, truncate_text

NOISE_SELECTOR = (
    "script, style, noscript, nav, header, footer, aside, .ad, .advertisement, .popup, .modal"
)

# Every selector is tried; the longest text wins
CONTENT_SELECTORS: tuple[str, ...] = (
    "main article",
    "main",
    "article",
    ".content",
    ".post-content",
    ".entry-content",
    ".article-body",
    ".article-content",
    '[role="main"]',
    "body",
)

DEFAULT_MAX_TEXT_LENGTH = 5000


@dataclass(frozen=True, slots=True)
class PageContent:
    """Title, text and meta description read from one HTML document."""

    title: str
    text: str
    description: str | None = None


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    content = tag.get("content")
    return content.strip() if isinstance(content, str) else ""


def _read_title(soup: BeautifulSoup) -> str:
    if soup.title is not None:
        title = collapse_whitespace(soup.title.get_text())
        if title:
            return title
    og_title = _meta_content(soup, property="og:title")
    if og_title:
        return collapse_whitespace(og_title)
    h1 = soup.find("h1")
    return collapse_whitespace(h1.get_text(" ")) if h1 is not None else ""


def parse_page(html: str, max_text_length: int = DEFAULT_MAX_TEXT_LENGTH) -> PageContent:
    """Select the readable part of ``html``.

    Page chrome (scripts, navigation, ads, modals) is removed first. Each
    content selector contributes the text of its first match and the longest
    candidate is kept, whitespace-collapsed and cut to ``max_text_length``.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    for element in soup.select(NOISE_SELECTOR):
        element.decompose()

    title = _read_title(soup)
    description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )

    best = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        candidate = element.get_text(" ", strip=True)
        if len(candidate) > len(best):
            best = candidate

    text = truncate_text(collapse_whitespace(best), max_text_length)
    return PageContent(title=title, text=text, description=description or None)
