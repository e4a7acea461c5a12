"""Unit tests for Job domain model."""

import pytest

from linkdigest.domain.exceptions import InvalidStateTransitionError
from linkdigest.domain.models.job import Job, JobStatus


def _job(**kwargs) -> Job:
    return Job(id="job-1", bookmark_id="bm-1", provider="anthropic", **kwargs)


class TestJob:
    """Test suite for Job domain model."""

    def test_create_job(self):
        """Test creating a job with defaults."""
        job = _job()

        assert job.status == JobStatus.PENDING
        assert job.attempts == 0
        assert job.max_attempts == 3
        assert job.priority == 1
        assert job.not_before == 0.0
        assert job.created_at.tzinfo is not None

    def test_mark_as_processing(self):
        """Test starting a pending job."""
        job = _job()

        job.mark_as_processing()

        assert job.status == JobStatus.PROCESSING
        assert job.started_at is not None

    def test_mark_as_processing_from_invalid_state_raises_error(self):
        """Test that a running job cannot be started again."""
        job = _job(status=JobStatus.PROCESSING)

        with pytest.raises(InvalidStateTransitionError, match="Cannot start job"):
            job.mark_as_processing()

    def test_mark_as_completed_clears_error(self):
        """Test completing a job after an earlier failure."""
        job = _job(status=JobStatus.PROCESSING, attempts=1, error="timeout")

        job.mark_as_completed()

        assert job.status == JobStatus.COMPLETED
        assert job.error is None
        assert job.completed_at is not None
        assert job.is_terminal()

    def test_mark_as_completed_requires_processing(self):
        """Test that a pending job cannot complete."""
        with pytest.raises(InvalidStateTransitionError):
            _job().mark_as_completed()

    def test_mark_as_failed_counts_attempts(self):
        """Test that each failure increments attempts and sets the retry time."""
        job = _job(status=JobStatus.PROCESSING)

        job.mark_as_failed("boom", retry_at=105.0)

        assert job.status == JobStatus.FAILED
        assert job.attempts == 1
        assert job.error == "boom"
        assert job.not_before == 105.0
        assert job.can_retry()
        assert not job.is_terminal()

    def test_exhausted_job_is_terminal(self):
        """Test that the last failure makes the job terminal."""
        job = _job(status=JobStatus.PROCESSING, attempts=2)

        job.mark_as_failed("boom", retry_at=50.0)

        assert job.attempts == 3
        assert not job.can_retry()
        assert job.is_terminal()
        assert job.not_before == 0.0
        assert not job.is_ready(1_000.0)

    def test_mark_as_failed_on_finished_job_raises_error(self):
        """Test that a completed job cannot fail."""
        job = _job(status=JobStatus.COMPLETED)

        with pytest.raises(InvalidStateTransitionError, match="Cannot fail job"):
            job.mark_as_failed("late")

    def test_requeue(self):
        """Test moving a retryable failure back to pending."""
        job = _job(status=JobStatus.PROCESSING)
        job.mark_as_failed("boom", retry_at=10.0)

        job.requeue()

        assert job.status == JobStatus.PENDING
        assert job.started_at is None
        assert job.attempts == 1

    def test_requeue_without_attempts_left_raises_error(self):
        """Test that an exhausted job cannot be requeued."""
        job = _job(status=JobStatus.FAILED, attempts=3)

        with pytest.raises(InvalidStateTransitionError, match="Cannot requeue"):
            job.requeue()

    def test_is_ready_respects_not_before(self):
        """Test dispatch readiness against the monotonic clock."""
        job = _job(not_before=20.0)

        assert not job.is_ready(19.9)
        assert job.is_ready(20.0)

    def test_status_values(self):
        """Test the wire values of JobStatus."""
        assert [s.value for s in JobStatus] == ["pending", "processing", "completed", "failed"]
