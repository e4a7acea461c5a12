"""In-memory implementation of the bookmark store.

Backs the CLI and the tests; a real deployment supplies its own store.
"""

from __future__ import annotations

import asyncio
import copy
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from linkdigest.domain.exceptions.domain_exceptions import ResourceNotFoundError
from linkdigest.domain.models.bookmark import Bookmark, BookmarkStatus


class InMemoryBookmarkStore:
    """Dict-backed bookmark store with atomic multi-field updates."""

    def __init__(self, bookmarks: list[Bookmark] | None = None) -> None:
        self._bookmarks: dict[str, Bookmark] = {}
        self._lock = asyncio.Lock()
        for bookmark in bookmarks or []:
            self._bookmarks[bookmark.id] = copy.deepcopy(bookmark)

    async def add(self, bookmark: Bookmark) -> None:
        async with self._lock:
            self._bookmarks[bookmark.id] = copy.deepcopy(bookmark)

    async def get(self, bookmark_id: str) -> Bookmark | None:
        async with self._lock:
            bookmark = self._bookmarks.get(bookmark_id)
            return copy.deepcopy(bookmark) if bookmark is not None else None

    async def update(self, bookmark_id: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - Bookmark.writable_fields()
        if unknown:
            msg = f"Unknown bookmark fields: {sorted(unknown)}"
            raise ValueError(msg)

        async with self._lock:
            current = self._bookmarks.get(bookmark_id)
            if current is None:
                raise ResourceNotFoundError(
                    f"Bookmark not found: {bookmark_id}", details={"bookmark_id": bookmark_id}
                )
            values = copy.deepcopy(fields)
            if "status" in values:
                values["status"] = BookmarkStatus(values["status"])
            values.setdefault("updated_at", datetime.now(UTC))
            # replace() builds the new record before anything is swapped in
            self._bookmarks[bookmark_id] = replace(current, **values)

    async def list(self, status: BookmarkStatus | None = None) -> list[Bookmark]:
        async with self._lock:
            return [
                copy.deepcopy(bookmark)
                for bookmark in self._bookmarks.values()
                if status is None or bookmark.status == status
            ]
