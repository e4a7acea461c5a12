"""Orchestrates extraction, summarization and persistence of bookmark summaries.

The service accepts "summarize this bookmark" requests, queues them as jobs
and drains the queue with a single background worker. Each job runs
Extractor -> Provider -> Quality Assessor and writes the whole result group
back to the bookmark in one store update.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from linkdigest.adapters.llm.factory import (
    PROVIDER_PRIORITY,
    ProviderFactory,
    normalize_provider_name,
)
from linkdigest.adapters.llm.model_cache import ModelCache
from linkdigest.application.services.job_queue import JobQueue
from linkdigest.config.jobs import JobQueueConfig
from linkdigest.core.async_utils import cancel_and_wait, raise_if_cancelled
from linkdigest.core.logging_utils import truncate_log_content
from linkdigest.domain.exceptions.domain_exceptions import (
    ContentFetchError,
    NoProviderConfiguredError,
    ProviderUnavailableError,
    ResourceNotFoundError,
    SummaryGenerationError,
)
from linkdigest.domain.models.bookmark import BookmarkStatus
from linkdigest.domain.models.job import Job, JobStatus

if TYPE_CHECKING:
    import httpx

    from linkdigest.adapters.content.content_extractor import ContentExtractor
    from linkdigest.adapters.llm.protocol import SummarizationProvider
    from linkdigest.models.content_models import ExtractionResult
    from linkdigest.models.llm_models import ModelInfo, ProviderConfig, SummaryResult
    from linkdigest.protocols import BookmarkStore, JobStore

logger = logging.getLogger(__name__)


class SummarizationService:
    """Queue-driven bookmark summarization pipeline.

    All collaborators are injected. At most one job is in flight; consecutive
    jobs are separated by ``inter_job_delay_sec``. A failed job is retried
    after ``retry_delay_sec`` until ``max_attempts`` runs have failed, then
    its bookmark is marked ``failed``.

    Example:
        ```python
        service = SummarizationService(extractor, bookmarks, jobs, providers)
        job_id = await service.submit(bookmark_id)
        await service.wait_until_idle()
        job = await service.get_job_status(job_id)
        ```

    """

    def __init__(
        self,
        extractor: ContentExtractor,
        bookmark_store: BookmarkStore,
        job_store: JobStore,
        providers: Mapping[str, SummarizationProvider] | Iterable[SummarizationProvider] = (),
        *,
        config: JobQueueConfig | None = None,
        model_cache: ModelCache | None = None,
        clock: Callable[[], float] = time.monotonic,
        http_client: httpx.AsyncClient | None = None,
        log_truncate_length: int = 1000,
    ) -> None:
        """Initialize the service.

        Args:
            extractor: Content extractor used for every job.
            bookmark_store: Store the bookmarks are read from and written to.
            job_store: Store that records job state.
            providers: Providers keyed by name, or an iterable of providers.
            config: Queue settings; defaults apply when omitted.
            model_cache: Cache for ``list_models``; a 5 minute cache when omitted.
            clock: Monotonic clock used for retry scheduling.
            http_client: Shared client for providers created by ``configure_provider``.
            log_truncate_length: Maximum length of summary text written to logs.

        """
        self._extractor = extractor
        self._bookmarks = bookmark_store
        self._jobs = job_store
        self._config = config or JobQueueConfig()
        self._model_cache = model_cache or ModelCache()
        self._clock = clock
        self._http_client = http_client
        self._log_truncate_length = log_truncate_length
        self._queue = JobQueue()
        self._job_available = asyncio.Event()
        self._worker: asyncio.Task[None] | None = None
        self._stopped = False

        if isinstance(providers, Mapping):
            items = providers.items()
        else:
            items = ((provider.name, provider) for provider in providers)
        self._providers: dict[str, SummarizationProvider] = {
            normalize_provider_name(name): provider for name, provider in items
        }

    @property
    def queue(self) -> JobQueue:
        return self._queue

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(
        self,
        bookmark_id: str,
        provider_name: str | None = None,
        priority: int | None = None,
    ) -> str:
        """Queue a summarization job for a bookmark.

        Args:
            bookmark_id: Bookmark to summarize.
            provider_name: Provider to use; picked by priority when omitted.
            priority: Queue priority; higher runs first.

        Returns:
            ID of the created job.

        Raises:
            ResourceNotFoundError: If the bookmark does not exist.
            NoProviderConfiguredError: If no provider is named and none is configured.
            ProviderUnavailableError: If the named provider is not supported.

        """
        bookmark = await self._bookmarks.get(bookmark_id)
        if bookmark is None:
            raise ResourceNotFoundError(
                f"Bookmark not found: {bookmark_id}", details={"bookmark_id": bookmark_id}
            )

        provider = self._select_provider(provider_name)
        job_priority = self._config.default_priority if priority is None else priority

        job_id = await self._jobs.create(
            bookmark_id, provider, job_priority, self._config.max_attempts
        )
        job = await self._jobs.get(job_id)
        if job is None:
            job = Job(
                id=job_id,
                bookmark_id=bookmark_id,
                provider=provider,
                priority=job_priority,
                max_attempts=self._config.max_attempts,
            )

        self._queue.push(job)
        self._job_available.set()
        logger.info(
            "summarization_job_queued",
            extra={
                "job_id": job_id,
                "bookmark_id": bookmark_id,
                "provider": provider,
                "priority": job_priority,
                "queue_length": len(self._queue),
            },
        )
        self.start()
        return job_id

    async def submit_many(
        self, bookmark_ids: Iterable[str], provider_name: str | None = None
    ) -> list[str]:
        """Queue one job per bookmark, in order; stops at the first failing submission."""
        return [await self.submit(bookmark_id, provider_name) for bookmark_id in bookmark_ids]

    def _select_provider(self, provider_name: str | None) -> str:
        if provider_name:
            try:
                return normalize_provider_name(provider_name)
            except ValueError as exc:
                raise ProviderUnavailableError(
                    str(exc), details={"provider": provider_name}
                ) from exc

        configured = self.get_configured_providers()
        for name in PROVIDER_PRIORITY:
            if name in configured:
                return name
        if configured:
            return configured[0]
        raise NoProviderConfiguredError(
            "No summarization provider configured",
            details={"registered": sorted(self._providers)},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_job_status(self, job_id: str) -> Job | None:
        return await self._jobs.get(job_id)

    async def queue_stats(self) -> dict[str, int]:
        """Job counts per status, plus the number of jobs still queued."""
        stats = await self._jobs.count_by_status()
        stats["queued"] = len(self._queue)
        return stats

    def get_configured_providers(self) -> list[str]:
        """Names of registered providers that have credentials."""
        return [name for name, provider in self._providers.items() if provider.is_configured()]

    # ------------------------------------------------------------------
    # Provider management
    # ------------------------------------------------------------------

    async def configure_provider(self, config: ProviderConfig) -> bool:
        """Create a provider from ``config`` and activate it if the backend accepts it.

        The provider replaces any existing one of the same name only after
        ``validate_config`` succeeds. Never raises.
        """
        try:
            provider = ProviderFactory.create(config, client=self._http_client)
        except ValueError as exc:
            logger.warning(
                "provider_configure_rejected", extra={"provider": config.name, "error": str(exc)}
            )
            return False

        try:
            is_valid = await provider.validate_config()
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning(
                "provider_configure_failed", extra={"provider": provider.name, "error": str(exc)}
            )
            is_valid = False

        if not is_valid:
            await provider.aclose()
            logger.info("provider_configure_invalid", extra={"provider": provider.name})
            return False

        previous = self._providers.get(provider.name)
        self._providers[provider.name] = provider
        if previous is not None and previous is not provider:
            await previous.aclose()
        logger.info(
            "provider_configured", extra={"provider": provider.name, "model": config.model}
        )
        return True

    async def validate_provider(self, name: str) -> bool:
        """Check a registered provider against its backend; False when unknown."""
        try:
            provider = self._providers.get(normalize_provider_name(name))
        except ValueError:
            return False
        if provider is None:
            return False
        return await provider.validate_config()

    async def list_models(self, provider_name: str, api_key: str) -> list[ModelInfo]:
        """List a provider's models, served from the cache while fresh.

        Empty listings are not cached so a transient failure is retried on the
        next call.
        """
        provider = normalize_provider_name(provider_name)
        cached = self._model_cache.get(provider, api_key)
        if cached is not None:
            logger.debug("model_list_cache_hit", extra={"provider": provider})
            return cached

        models = await ProviderFactory.list_models(provider, api_key, client=self._http_client)
        if models:
            self._model_cache.set(provider, api_key, models)
        logger.info("model_list_fetched", extra={"provider": provider, "count": len(models)})
        return models

    # ------------------------------------------------------------------
    # Worker lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the worker if jobs are queued and none is running."""
        if self._stopped:
            logger.warning("summarization_service_stopped", extra={"queued": len(self._queue)})
            return
        if self.is_running or not self._queue:
            return
        self._worker = asyncio.create_task(self._run_worker(), name="summarization-worker")

    async def stop(self) -> None:
        """Cancel the worker and close every provider."""
        self._stopped = True
        await cancel_and_wait(self._worker)
        self._worker = None
        for provider in self._providers.values():
            await provider.aclose()
        logger.info("summarization_service_closed", extra={"queued": len(self._queue)})

    async def wait_until_idle(self) -> None:
        """Wait until the current worker has drained the queue."""
        while self._worker is not None and not self._worker.done():
            await asyncio.wait({self._worker})

    async def _run_worker(self) -> None:
        logger.info("summarization_worker_started", extra={"queued": len(self._queue)})
        while self._queue:
            now = self._clock()
            job = self._queue.pop_ready(now)
            if job is None:
                wait = self._queue.seconds_until_ready(now) or 0.0
                # Wake early when a new job is submitted during the delay
                self._job_available.clear()
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(self._job_available.wait(), timeout=wait)
                continue

            await self._process_job(job)

            if self._queue and self._config.inter_job_delay_sec > 0:
                await asyncio.sleep(self._config.inter_job_delay_sec)
        logger.info("summarization_worker_idle")

    # ------------------------------------------------------------------
    # Job processing
    # ------------------------------------------------------------------

    async def _process_job(self, job: Job) -> None:
        started = time.perf_counter()
        try:
            if job.status == JobStatus.FAILED:
                job.requeue()
            job.mark_as_processing()
            await self._jobs.update_status(
                job.id,
                JobStatus.PROCESSING,
                {"attempts": job.attempts, "started_at": job.started_at, "completed_at": None},
            )
            logger.info(
                "summarization_job_started",
                extra={
                    "job_id": job.id,
                    "bookmark_id": job.bookmark_id,
                    "provider": job.provider,
                    "attempt": job.attempts + 1,
                },
            )

            bookmark = await self._bookmarks.get(job.bookmark_id)
            if bookmark is None:
                raise ResourceNotFoundError(
                    f"Bookmark not found: {job.bookmark_id}",
                    details={"bookmark_id": job.bookmark_id},
                )
            await self._bookmarks.update(bookmark.id, {"status": BookmarkStatus.PROCESSING})

            extraction = await self._extractor.extract(bookmark.url)
            if extraction.error:
                raise ContentFetchError(
                    f"Content extraction failed: {extraction.error}",
                    details={"url": bookmark.url, "method": extraction.method.value},
                )

            provider = self._providers.get(job.provider)
            if provider is None or not provider.is_configured():
                raise ProviderUnavailableError(
                    f"Provider {job.provider} not available",
                    details={"registered": sorted(self._providers)},
                )

            summary = await provider.summarize(
                extraction.text, bookmark.url, bookmark.title or extraction.title
            )
            if summary.is_error:
                raise SummaryGenerationError(
                    f"Summarization failed: {summary.error}", details={"provider": job.provider}
                )

            logger.info(
                "summarization_quality_outcome",
                extra={
                    "job_id": job.id,
                    "provider": job.provider,
                    "quality_score": summary.quality_score,
                    "quality_issues": summary.quality_issues or [],
                    "short_summary": truncate_log_content(
                        summary.short_summary, self._log_truncate_length
                    ),
                },
            )

            await self._bookmarks.update(
                bookmark.id, self._result_fields(job.provider, summary, extraction)
            )

            job.mark_as_completed()
            await self._jobs.update_status(
                job.id, JobStatus.COMPLETED, {"error": None, "completed_at": job.completed_at}
            )
            logger.info(
                "summarization_job_completed",
                extra={
                    "job_id": job.id,
                    "bookmark_id": job.bookmark_id,
                    "extraction_method": extraction.method.value,
                    "elapsed_ms": int((time.perf_counter() - started) * 1000),
                },
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            await self._fail_job(job, exc)

    async def _fail_job(self, job: Job, exc: Exception) -> None:
        error = str(exc) or type(exc).__name__
        if job.status not in (JobStatus.PENDING, JobStatus.PROCESSING):
            logger.error(
                "summarization_job_error_after_finish",
                extra={"job_id": job.id, "status": job.status.value, "error": error},
            )
            return
        job.mark_as_failed(error, retry_at=self._clock() + self._config.retry_delay_sec)
        await self._jobs.update_status(
            job.id,
            JobStatus.FAILED,
            {
                "attempts": job.attempts,
                "error": error,
                "not_before": job.not_before,
                "completed_at": job.completed_at,
            },
        )

        if job.can_retry():
            self._queue.push(job)
            logger.warning(
                "summarization_job_retry_scheduled",
                extra={
                    "job_id": job.id,
                    "bookmark_id": job.bookmark_id,
                    "attempts": job.attempts,
                    "max_attempts": job.max_attempts,
                    "retry_delay_sec": self._config.retry_delay_sec,
                    "error": error,
                },
            )
            return

        logger.error(
            "summarization_job_failed",
            extra={
                "job_id": job.id,
                "bookmark_id": job.bookmark_id,
                "attempts": job.attempts,
                "error": error,
            },
        )
        try:
            await self._bookmarks.update(job.bookmark_id, {"status": BookmarkStatus.FAILED})
        except ResourceNotFoundError:
            logger.warning("summarization_failed_bookmark_missing", extra={"job_id": job.id})

    @staticmethod
    def _result_fields(
        provider: str, summary: SummaryResult, extraction: ExtractionResult
    ) -> dict[str, Any]:
        # One update: summary group, extraction fields and status together
        return {
            "short_summary": summary.short_summary,
            "long_summary": summary.long_summary,
            "tags": list(summary.tags),
            "category": summary.category,
            "ai_provider": provider,
            "quality_score": summary.quality_score,
            "quality_issues": list(summary.quality_issues or []),
            "extracted_content": extraction.text,
            "extraction_method": extraction.method.value,
            "extraction_metadata": extraction.metadata.model_dump(mode="json"),
            "status": BookmarkStatus.ANALYZED,
        }
