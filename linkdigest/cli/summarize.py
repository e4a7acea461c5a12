"""CLI tooling to run the summarization pipeline locally for a set of URLs."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import Any

from linkdigest.adapters.content import ContentExtractor
from linkdigest.adapters.llm import ProviderFactory, normalize_provider_name
from linkdigest.application.services import QualityReportService, SummarizationService
from linkdigest.config import AppConfig, load_config
from linkdigest.core.logging_utils import (
    generate_correlation_id,
    setup_json_logging,
    setup_plain_logging,
)
from linkdigest.core.url_utils import url_hash_md5
from linkdigest.domain.exceptions import DomainException
from linkdigest.domain.models.bookmark import Bookmark
from linkdigest.infrastructure.persistence.memory import InMemoryBookmarkStore, InMemoryJobStore

logger = logging.getLogger(__name__)

__all__ = ["main", "run_summarize_cli"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Extract and summarize one or more web pages",
        allow_abbrev=False,
    )
    parser.add_argument("urls", nargs="*", help="URLs to summarize.")
    parser.add_argument(
        "--provider",
        help="Provider to use (anthropic, claude or openai); picked by priority when omitted.",
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List the models offered by --provider and exit.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print results as JSON instead of text.",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print a quality report after the run.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level for this session.",
    )
    return parser.parse_args(argv)


def _prepare_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration, optionally applying CLI overrides."""
    try:
        cfg = load_config()
    except RuntimeError as exc:
        msg = f"Configuration error: {exc}"
        raise SystemExit(msg) from exc

    if args.log_level:
        cfg = replace(cfg, runtime=cfg.runtime.model_copy(update={"log_level": args.log_level}))
    return cfg


def _bookmark_payload(bookmark: Bookmark, job_status: str | None, error: str | None) -> dict[str, Any]:
    return {
        "url": bookmark.url,
        "status": bookmark.status.value,
        "job_status": job_status,
        "error": error,
        "provider": bookmark.ai_provider,
        "category": bookmark.category,
        "tags": bookmark.tags,
        "short_summary": bookmark.short_summary,
        "long_summary": bookmark.long_summary,
        "quality_score": bookmark.quality_score,
        "quality_issues": bookmark.quality_issues,
        "extraction_method": bookmark.extraction_method,
    }


def _print_text(payload: dict[str, Any]) -> None:
    lines = [f"{payload['url']} [{payload['status']}]"]
    if payload["short_summary"]:
        lines.append(f"  {payload['short_summary']}")
        lines.append(f"  category: {payload['category']}  tags: {', '.join(payload['tags'])}")
        lines.append(
            f"  provider: {payload['provider']}  quality: {payload['quality_score']}"
            f"  via: {payload['extraction_method']}"
        )
        lines.extend(f"  issue: {issue}" for issue in payload["quality_issues"])
    if payload["error"]:
        lines.append(f"  error: {payload['error']}")
    sys.stdout.write("\n".join(lines) + "\n\n")


async def _list_models(cfg: AppConfig, provider: str, as_json: bool) -> int:
    try:
        name = normalize_provider_name(provider)
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2
    configs = {c.name: c for c in ProviderFactory.configs_from_app_config(cfg)}
    config = configs.get(name)
    if config is None:
        sys.stderr.write(f"No API key configured for provider: {provider}\n")
        return 1
    models = await ProviderFactory.list_models(config.name, config.api_key)
    if as_json:
        sys.stdout.write(json.dumps([m.model_dump() for m in models], indent=2) + "\n")
    else:
        for model in models:
            sys.stdout.write(f"{model.id}\t{model.name}\t{model.description or ''}\n")
    return 0


async def run_summarize_cli(args: argparse.Namespace) -> int:
    """Run the pipeline for the URLs in ``args`` and print the results."""
    cfg = _prepare_config(args)
    if cfg.runtime.log_json:
        setup_json_logging(cfg.runtime.log_level)
    else:
        setup_plain_logging(cfg.runtime.log_level)

    if args.list_models:
        if not args.provider:
            sys.stderr.write("--list-models requires --provider\n")
            return 2
        return await _list_models(cfg, args.provider, args.as_json)

    if not args.urls:
        sys.stderr.write("Provide at least one URL to summarize.\n")
        return 2

    correlation_id = generate_correlation_id()
    logger.info("cli_summarize_start", extra={"cid": correlation_id, "urls": len(args.urls)})

    bookmarks = [
        Bookmark(id=url_hash_md5(url), url=url, folder_path="cli") for url in dict.fromkeys(args.urls)
    ]
    bookmark_store = InMemoryBookmarkStore(bookmarks)
    job_store = InMemoryJobStore()
    providers = [ProviderFactory.create(c) for c in ProviderFactory.configs_from_app_config(cfg)]

    extractor = ContentExtractor(cfg.extraction)
    service = SummarizationService(
        extractor,
        bookmark_store,
        job_store,
        providers,
        config=cfg.jobs,
        log_truncate_length=cfg.runtime.log_truncate_length,
    )
    try:
        try:
            job_ids = await service.submit_many([b.id for b in bookmarks], args.provider)
        except DomainException as exc:
            sys.stderr.write(f"{exc.message}\n")
            return 2
        await service.wait_until_idle()

        payloads = []
        for bookmark_id, job_id in zip((b.id for b in bookmarks), job_ids, strict=True):
            bookmark = await bookmark_store.get(bookmark_id)
            job = await service.get_job_status(job_id)
            if bookmark is None:
                continue
            payloads.append(
                _bookmark_payload(
                    bookmark,
                    job.status.value if job else None,
                    job.error if job else None,
                )
            )

        report = None
        if args.report:
            report = await QualityReportService(bookmark_store).get_quality_report()

        if args.as_json:
            output: dict[str, Any] = {"results": payloads}
            if report is not None:
                output["quality_report"] = report.model_dump()
            sys.stdout.write(json.dumps(output, indent=2, ensure_ascii=False) + "\n")
        else:
            for payload in payloads:
                _print_text(payload)
            if report is not None:
                sys.stdout.write(
                    f"analyzed: {report.total_analyzed}  average: {report.average_score}  "
                    f"high/medium/low: {report.high_quality}/{report.medium_quality}/"
                    f"{report.low_quality}\n"
                )

        logger.info(
            "cli_summarize_done",
            extra={"cid": correlation_id, "stats": await service.queue_stats()},
        )
        failed = sum(1 for p in payloads if p["job_status"] != "completed")
        return 1 if failed else 0
    finally:
        await service.stop()
        await extractor.aclose()


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``linkdigest-summarize``."""
    args = parse_args(argv)
    try:
        return asyncio.run(run_summarize_cli(args))
    except KeyboardInterrupt:  # pragma: no cover - user cancelled
        return 1
    except Exception as exc:
        logger.exception("cli_summarize_failed", exc_info=exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
