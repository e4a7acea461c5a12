from __future__ import annotations

import datetime as dt
import json
import logging
import sys
import uuid
from typing import Any

# Attributes every LogRecord carries; anything else arrived through ``extra=``
_STANDARD_FIELDS = frozenset(
    {
        "args",
        "msg",
        "name",
        "levelno",
        "levelname",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "message",
    }
)

_PERFORMANCE_FIELDS = frozenset(
    {
        "latency_ms",
        "elapsed_ms",
        "tokens_prompt",
        "tokens_completion",
        "content_length",
        "source_size",
    }
)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON with ``extra=`` context grouped."""

    def __init__(self, include_location: bool = True) -> None:
        super().__init__()
        self.include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "timestamp": dt.datetime.fromtimestamp(record.created, tz=dt.UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_location:
            base.update(
                {
                    "module": record.module,
                    "function": record.funcName,
                    "line": record.lineno,
                }
            )

        if record.exc_info:
            base["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields: dict[str, Any] = {}
        performance_fields: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _STANDARD_FIELDS or key in base:
                continue
            if key in _PERFORMANCE_FIELDS:
                performance_fields[key] = value
            elif key in ("correlation_id", "cid"):
                base["correlation_id"] = value
            else:
                extra_fields[key] = value

        if performance_fields:
            base["performance"] = performance_fields
        if extra_fields:
            base["extra"] = extra_fields

        return json.dumps(
            base, ensure_ascii=False, default=self._json_serializer, separators=(",", ":")
        )

    def _json_serializer(self, obj: Any) -> str:
        """Custom JSON serializer for non-standard types."""
        if isinstance(obj, dt.datetime):
            return obj.isoformat()
        if hasattr(obj, "value") and hasattr(obj, "name"):
            return str(obj.value)
        return str(obj)


def setup_json_logging(level: str = "INFO", include_location: bool = True) -> None:
    """Configure root logging to emit JSON lines on stderr.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_location: Include module/function/line information in logs
    """
    lvl = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(lvl)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter(include_location=include_location))
    root.addHandler(handler)

    logging.getLogger(__name__).debug("json_logging_initialized", extra={"level": level})

    # httpx logs every request at INFO
    for noisy_logger in ("httpx", "httpcore"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


def setup_plain_logging(level: str = "INFO") -> None:
    """Configure human-readable logging for interactive use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    for noisy_logger in ("httpx", "httpcore"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


def generate_correlation_id() -> str:
    """Generate a short correlation ID for tracing a job across log lines."""
    return uuid.uuid4().hex[:12]


def truncate_log_content(content: str | None, max_length: int = 1000) -> str | None:
    """Truncate large content for logging to avoid cluttering logs.

    Args:
        content: The content to potentially truncate
        max_length: Maximum length before truncation (default 1000)

    Returns:
        Truncated content with ellipsis if truncated, or original content if short enough

    """
    if not content:
        return content
    if len(content) <= max_length:
        return content

    if max_length > 20:
        truncate_at = max_length - 15
        truncated = content[:truncate_at]

        last_space = truncated.rfind(" ", max(0, truncate_at - 50))
        if last_space > max(0, truncate_at - 100):
            truncated = truncated[:last_space]

        return truncated + "... [truncated]"

    return content[:max_length] + "..."


__all__ = [
    "JsonFormatter",
    "generate_correlation_id",
    "setup_json_logging",
    "setup_plain_logging",
    "truncate_log_content",
]
