"""In-memory priority queue of summarization jobs."""

from __future__ import annotations

import bisect
import itertools
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from linkdigest.domain.models.job import Job


class _QueueEntry(NamedTuple):
    sort_key: tuple[int, int]
    job: Job


class JobQueue:
    """Jobs ordered by descending priority, ties broken by insertion order.

    A job stays queued while it waits out its ``not_before`` delay, so
    ``pop_ready`` may skip over entries that are not due yet.
    """

    def __init__(self) -> None:
        self._entries: list[_QueueEntry] = []
        self._sequence = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, job_id: object) -> bool:
        return any(entry.job.id == job_id for entry in self._entries)

    def push(self, job: Job) -> None:
        entry = _QueueEntry((-job.priority, next(self._sequence)), job)
        bisect.insort(self._entries, entry, key=lambda item: item.sort_key)

    def pop_ready(self, now: float) -> Job | None:
        """Remove and return the first job that may run at ``now``."""
        for index, entry in enumerate(self._entries):
            if entry.job.is_ready(now):
                del self._entries[index]
                return entry.job
        return None

    def seconds_until_ready(self, now: float) -> float | None:
        """Shortest wait until some queued job is due; None when the queue is empty."""
        if not self._entries:
            return None
        return max(0.0, min(entry.job.not_before for entry in self._entries) - now)

    def remove(self, job_id: str) -> Job | None:
        for index, entry in enumerate(self._entries):
            if entry.job.id == job_id:
                del self._entries[index]
                return entry.job
        return None

    def jobs(self) -> list[Job]:
        """Queued jobs in dispatch order."""
        return [entry.job for entry in self._entries]
