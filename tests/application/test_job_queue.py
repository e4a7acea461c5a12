"""Tests for the in-memory job priority queue."""

from __future__ import annotations

from linkdigest.application.services.job_queue import JobQueue
from linkdigest.domain.models.job import Job, JobStatus


def _job(job_id: str, priority: int = 1, **kwargs) -> Job:
    return Job(id=job_id, bookmark_id=f"bm-{job_id}", provider="openai", priority=priority, **kwargs)


class TestJobQueue:
    def test_empty_queue(self) -> None:
        queue = JobQueue()

        assert len(queue) == 0
        assert not queue
        assert queue.pop_ready(0.0) is None
        assert queue.seconds_until_ready(0.0) is None

    def test_higher_priority_first_then_fifo(self) -> None:
        queue = JobQueue()
        for job in (_job("a", 1), _job("b", 5), _job("c", 1), _job("d", 5), _job("e", -2)):
            queue.push(job)

        assert [job.id for job in queue.jobs()] == ["b", "d", "a", "c", "e"]
        assert [queue.pop_ready(0.0).id for _ in range(5)] == ["b", "d", "a", "c", "e"]
        assert not queue

    def test_pop_ready_skips_delayed_jobs(self) -> None:
        queue = JobQueue()
        queue.push(_job("late", 10, status=JobStatus.FAILED, attempts=1, not_before=50.0))
        queue.push(_job("now", 1))

        assert queue.pop_ready(10.0).id == "now"
        assert queue.pop_ready(10.0) is None
        assert queue.seconds_until_ready(10.0) == 40.0
        assert queue.pop_ready(50.0).id == "late"

    def test_seconds_until_ready_never_negative(self) -> None:
        queue = JobQueue()
        queue.push(_job("a", not_before=5.0))

        assert queue.seconds_until_ready(100.0) == 0.0

    def test_contains_and_remove(self) -> None:
        queue = JobQueue()
        queue.push(_job("a"))
        queue.push(_job("b"))

        assert "a" in queue
        assert queue.remove("a").id == "a"
        assert "a" not in queue
        assert queue.remove("missing") is None
        assert len(queue) == 1

    def test_terminal_jobs_are_never_ready(self) -> None:
        queue = JobQueue()
        queue.push(_job("done", status=JobStatus.FAILED, attempts=3))

        assert queue.pop_ready(1_000.0) is None
