"""In-memory TTL cache for provider model listings."""

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable
from dataclasses import dataclass

from linkdigest.models.llm_models import ModelInfo

DEFAULT_TTL_SEC = 5 * 60
PRUNE_THRESHOLD = 100


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    models: tuple[ModelInfo, ...]
    stored_at: float


def _key_fingerprint(api_key: str) -> str:
    # Keys are never stored verbatim
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()[:16]


class ModelCache:
    """Caches model listings per (provider, API key) for a fixed TTL.

    Expired entries are dropped on read, and swept once the cache holds more
    than ``PRUNE_THRESHOLD`` entries.
    """

    def __init__(
        self,
        ttl_sec: float = DEFAULT_TTL_SEC,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_sec = ttl_sec
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _cache_key(provider: str, api_key: str) -> str:
        return f"{provider}:{_key_fingerprint(api_key)}"

    def _is_expired(self, entry: _CacheEntry, now: float) -> bool:
        return now - entry.stored_at > self._ttl_sec

    def get(self, provider: str, api_key: str) -> list[ModelInfo] | None:
        key = self._cache_key(provider, api_key)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            return None
        return list(entry.models)

    def set(self, provider: str, api_key: str, models: list[ModelInfo]) -> None:
        self._entries[self._cache_key(provider, api_key)] = _CacheEntry(
            models=tuple(models), stored_at=self._clock()
        )
        if len(self._entries) > PRUNE_THRESHOLD:
            self.prune()

    def prune(self) -> int:
        """Drop expired entries; return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
