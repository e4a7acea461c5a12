from __future__ import annotations

import hashlib
import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES: frozenset[str] = frozenset(["http", "https"])


def url_hash_md5(url: str) -> str:
    """Return a stable md5 hex digest for ``url``, used to key temporary files."""
    return hashlib.md5(url.encode("utf-8"), usedforsecurity=False).hexdigest()


def is_http_url(url: str) -> bool:
    """Return True when ``url`` parses as an absolute http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme.lower() in _ALLOWED_SCHEMES and bool(parsed.netloc)


def build_variant_url(url: str, variant: str) -> str | None:
    """Apply a reader-mode variant to ``url``.

    Query variants (``?reader=true``) are appended to the existing query string;
    path variants (``/amp``) are inserted between the origin and the path.
    Returns ``None`` for variants of an unknown shape.
    """
    if variant.startswith("?"):
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{variant[1:]}"
    if variant.startswith("/"):
        parsed = urlparse(url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        search = f"?{parsed.query}" if parsed.query else ""
        return f"{origin}{variant}{parsed.path}{search}"
    return None


def describe_url(url: str) -> tuple[str, str]:
    """Derive a ``(title, description)`` pair from the URL alone.

    The domain loses its ``www.`` prefix and path segments become words, so
    ``https://www.example.com/blog/my-first_post`` gives
    ``("blog my first post", "Content from example.com: blog my first post")``.
    """
    try:
        parsed = urlparse(url)
        domain = (parsed.hostname or "").removeprefix("www.")
    except ValueError:
        domain = ""
        parsed = None

    if not domain or parsed is None:
        return "Unknown Website", f"Website: {url}"

    path_words = " ".join(
        part.replace("-", " ").replace("_", " ").strip()
        for part in parsed.path.split("/")
        if part.strip()
    ).strip()
    title = path_words or domain
    description = f"Content from {domain}: {path_words}" if path_words else f"Content from {domain}"
    return title, description
