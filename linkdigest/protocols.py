"""Protocol definitions for the stores the summarization pipeline depends on.

Storage design is outside this package; these contracts are what the
orchestrator and the quality report need.
"""

from typing import Any, Protocol

from linkdigest.domain.models.bookmark import Bookmark, BookmarkStatus
from linkdigest.domain.models.job import Job, JobStatus


class BookmarkStore(Protocol):
    """Protocol for bookmark persistence."""

    async def add(self, bookmark: Bookmark) -> None:
        """Insert or replace a bookmark."""
        ...

    async def get(self, bookmark_id: str) -> Bookmark | None:
        """Get a bookmark by its ID.

        Returns:
            A detached copy of the bookmark, or None if not found.

        """
        ...

    async def update(self, bookmark_id: str, fields: dict[str, Any]) -> None:
        """Apply every field in ``fields`` at once, or none of them.

        Raises:
            ResourceNotFoundError: If the bookmark does not exist.
            ValueError: If any field name is unknown.

        """
        ...

    async def list(self, status: BookmarkStatus | None = None) -> list[Bookmark]:
        """List bookmarks, optionally filtered by status."""
        ...


class JobStore(Protocol):
    """Protocol for summarization job persistence."""

    async def create(
        self, bookmark_id: str, provider: str, priority: int, max_attempts: int
    ) -> str:
        """Create a pending job.

        Returns:
            The ID of the created job.

        """
        ...

    async def get(self, job_id: str) -> Job | None:
        """Get a job by its ID, or None if not found."""
        ...

    async def update_status(
        self, job_id: str, status: JobStatus, fields: dict[str, Any] | None = None
    ) -> None:
        """Set the job's status along with any other changed fields.

        Raises:
            ResourceNotFoundError: If the job does not exist.
            ValueError: If any field name is unknown.

        """
        ...

    async def count_by_status(self) -> dict[str, int]:
        """Return the number of jobs per status value."""
        ...
