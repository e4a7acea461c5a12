"""Summarization job domain model.

A Job asks the pipeline to summarize one bookmark with one provider. It moves
``pending -> processing -> completed | failed``; a failed job with attempts
left waits until ``not_before`` and then re-enters ``pending``.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from linkdigest.domain.exceptions.domain_exceptions import InvalidStateTransitionError


class JobStatus(str, Enum):
    """Status of a job in its lifecycle."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class Job:
    """Domain model for a queued summarization job.

    ``attempts`` counts failed runs. ``not_before`` is a ``time.monotonic()``
    timestamp before which the job must not be dispatched.
    """

    id: str
    bookmark_id: str
    provider: str
    priority: int = 1
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0
    max_attempts: int = 3
    error: str | None = None
    not_before: float = 0.0
    created_at: datetime = field(default_factory=_utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def mark_as_processing(self) -> None:
        """Mark the job as running.

        Raises:
            InvalidStateTransitionError: If the job is not pending.
        """
        if self.status != JobStatus.PENDING:
            raise InvalidStateTransitionError(
                f"Cannot start job from status: {self.status.value}",
                details={"job_id": self.id, "status": self.status.value},
            )
        self.status = JobStatus.PROCESSING
        self.started_at = _utcnow()

    def mark_as_completed(self) -> None:
        """Mark the job as successfully completed.

        Raises:
            InvalidStateTransitionError: If the job is not processing.
        """
        if self.status != JobStatus.PROCESSING:
            raise InvalidStateTransitionError(
                f"Cannot complete job from status: {self.status.value}",
                details={"job_id": self.id, "status": self.status.value},
            )
        self.status = JobStatus.COMPLETED
        self.error = None
        self.completed_at = _utcnow()

    def mark_as_failed(self, error: str, *, retry_at: float | None = None) -> None:
        """Record a failed run.

        Args:
            error: Error message to keep on the job.
            retry_at: Monotonic time after which a retry may run. Ignored once
                the attempts are exhausted.

        Raises:
            InvalidStateTransitionError: If the job already finished.
        """
        if self.status in (JobStatus.COMPLETED, JobStatus.FAILED):
            raise InvalidStateTransitionError(
                f"Cannot fail job from status: {self.status.value}",
                details={"job_id": self.id, "status": self.status.value},
            )
        self.attempts += 1
        self.status = JobStatus.FAILED
        self.error = error
        self.completed_at = _utcnow()
        if retry_at is not None and self.can_retry():
            self.not_before = retry_at

    def requeue(self) -> None:
        """Move a retryable failed job back to pending.

        Raises:
            InvalidStateTransitionError: If the job is not failed or has no attempts left.
        """
        if self.status != JobStatus.FAILED or not self.can_retry():
            raise InvalidStateTransitionError(
                f"Cannot requeue job from status: {self.status.value}",
                details={
                    "job_id": self.id,
                    "status": self.status.value,
                    "attempts": self.attempts,
                },
            )
        self.status = JobStatus.PENDING
        self.started_at = None
        self.completed_at = None

    def can_retry(self) -> bool:
        """Check if another attempt is allowed."""
        return self.attempts < self.max_attempts

    def is_terminal(self) -> bool:
        """Check if the job will never be dispatched again."""
        if self.status == JobStatus.COMPLETED:
            return True
        return self.status == JobStatus.FAILED and not self.can_retry()

    def is_ready(self, now: float) -> bool:
        """Check if the job may be dispatched at monotonic time ``now``."""
        return not self.is_terminal() and now >= self.not_before
