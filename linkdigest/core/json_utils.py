from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", flags=re.IGNORECASE | re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def _loads_object(raw: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_json(text: str | None) -> dict[str, Any] | None:
    """Extract a JSON object from an LLM response.

    Recovers from Markdown code fences, explanatory prose around the object,
    trailing commas and missing closing braces. Returns ``None`` when no
    object can be recovered.
    """
    if not isinstance(text, str):
        return None

    candidate = text.strip()
    if not candidate:
        return None

    fence_match = _FENCE_RE.search(candidate)
    candidate = fence_match.group(1).strip() if fence_match else candidate.strip("`")
    candidate = re.sub(r"^json\s*", "", candidate, flags=re.IGNORECASE)

    parsed = _loads_object(candidate)
    if parsed is not None:
        return parsed

    start = candidate.find("{")
    if start == -1:
        return None
    end = candidate.rfind("}")
    snippet = candidate[start:] if end <= start else candidate[start : end + 1]
    parsed = _loads_object(snippet)
    if parsed is not None:
        return parsed

    snippet = _TRAILING_COMMA_RE.sub(r"\1", snippet)
    parsed = _loads_object(snippet)
    if parsed is not None:
        return parsed

    # Truncated responses usually lose their closing braces
    brace_diff = snippet.count("{") - snippet.count("}")
    if brace_diff > 0:
        return _loads_object(snippet + "}" * brace_diff)
    return None


def coerce_str_list(value: Any, *, limit: int | None = None) -> list[str]:
    """Normalize a JSON value into a list of non-empty, de-duplicated strings.

    Accepts a list, or a comma-separated string as some models return.
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    if not isinstance(items, list | tuple):
        return []

    result: list[str] = []
    seen: set[str] = set()
    for item in items:
        if item is None or isinstance(item, dict | list):
            continue
        text = str(item).strip()
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        result.append(text)
        if limit is not None and len(result) >= limit:
            break
    return result
