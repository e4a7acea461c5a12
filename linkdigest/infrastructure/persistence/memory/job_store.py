"""In-memory implementation of the job store."""

from __future__ import annotations

import asyncio
import uuid
from collections import Counter
from dataclasses import fields, replace
from typing import Any

from linkdigest.domain.exceptions.domain_exceptions import ResourceNotFoundError
from linkdigest.domain.models.job import Job, JobStatus

_WRITABLE_FIELDS = frozenset(f.name for f in fields(Job)) - {"id", "bookmark_id", "status"}


class InMemoryJobStore:
    """Dict-backed job store; ``get`` returns detached copies."""

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}
        self._lock = asyncio.Lock()

    async def create(
        self, bookmark_id: str, provider: str, priority: int, max_attempts: int
    ) -> str:
        job_id = uuid.uuid4().hex
        async with self._lock:
            self._jobs[job_id] = Job(
                id=job_id,
                bookmark_id=bookmark_id,
                provider=provider,
                priority=priority,
                max_attempts=max_attempts,
            )
        return job_id

    async def get(self, job_id: str) -> Job | None:
        async with self._lock:
            job = self._jobs.get(job_id)
            return replace(job) if job is not None else None

    async def update_status(
        self, job_id: str, status: JobStatus, fields: dict[str, Any] | None = None
    ) -> None:
        values = dict(fields or {})
        unknown = set(values) - _WRITABLE_FIELDS
        if unknown:
            msg = f"Unknown job fields: {sorted(unknown)}"
            raise ValueError(msg)

        async with self._lock:
            current = self._jobs.get(job_id)
            if current is None:
                raise ResourceNotFoundError(f"Job not found: {job_id}", details={"job_id": job_id})
            self._jobs[job_id] = replace(current, status=JobStatus(status), **values)

    async def count_by_status(self) -> dict[str, int]:
        async with self._lock:
            counts = Counter(job.status.value for job in self._jobs.values())
        return {status.value: counts.get(status.value, 0) for status in JobStatus}
