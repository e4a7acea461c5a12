from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str | None) -> str:
    """Collapse every whitespace run (newlines included) to a single space."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_text(text: str, max_length: int, suffix: str = "") -> str:
    """Cut ``text`` to ``max_length`` characters, appending ``suffix`` when cut."""
    if max_length < 0:
        msg = f"max_length must be non-negative, got {max_length}"
        raise ValueError(msg)
    if len(text) <= max_length:
        return text
    return text[:max_length] + suffix


def first_line(text: str, max_length: int) -> str:
    """Return the first non-empty line of ``text``, trimmed to ``max_length``."""
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped[:max_length]
    return ""
