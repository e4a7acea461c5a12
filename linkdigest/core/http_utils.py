from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

# 529 is Anthropic's "overloaded"
TRANSIENT_STATUS_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504, 529})


class ResponseSizeError(ValueError):
    """Raised when a response exceeds the maximum allowed size."""

    def __init__(self, message: str, *, actual_size: int | None = None, max_size: int) -> None:
        super().__init__(message)
        self.actual_size = actual_size
        self.max_size = max_size


def check_declared_size(response: httpx.Response, max_size_bytes: int, service_name: str) -> None:
    """Reject a response whose Content-Length header already exceeds the budget.

    Missing or malformed headers are tolerated; the streamed byte count is the
    authoritative check (see :func:`read_limited_body`).

    Raises:
        ResponseSizeError: If the declared size exceeds ``max_size_bytes``.
        ValueError: If ``max_size_bytes`` is not a positive integer.
    """
    if not isinstance(max_size_bytes, int) or max_size_bytes <= 0:
        msg = f"max_size_bytes must be a positive integer, got {max_size_bytes}"
        raise ValueError(msg)

    content_length_str = response.headers.get("content-length")
    if not content_length_str:
        return
    try:
        content_length = int(content_length_str)
    except ValueError:
        logger.warning(
            "invalid_content_length_header",
            extra={
                "service": service_name,
                "content_length": content_length_str,
                "status_code": response.status_code,
            },
        )
        return

    if content_length > max_size_bytes:
        msg = (
            f"{service_name} response size ({content_length} bytes) "
            f"exceeds limit ({max_size_bytes} bytes)"
        )
        raise ResponseSizeError(msg, actual_size=content_length, max_size=max_size_bytes)


async def read_limited_body(
    response: httpx.Response,
    max_size_bytes: int,
    service_name: str,
) -> bytes:
    """Read a streamed response body, aborting once it grows past ``max_size_bytes``.

    Args:
        response: A response opened with ``client.stream(...)``.
        max_size_bytes: Byte budget for the body.
        service_name: Label used in error messages and logs.

    Returns:
        The raw body bytes.

    Raises:
        ResponseSizeError: If the declared or streamed size exceeds the budget.
    """
    check_declared_size(response, max_size_bytes, service_name)

    buf = bytearray()
    async for chunk in response.aiter_bytes():
        buf.extend(chunk)
        if len(buf) > max_size_bytes:
            msg = f"{service_name} response exceeded {max_size_bytes} bytes while streaming"
            raise ResponseSizeError(msg, actual_size=len(buf), max_size=max_size_bytes)
    return bytes(buf)


def decode_body(body: bytes, encoding: str | None) -> str:
    """Decode response bytes with the declared charset, replacing undecodable input."""
    try:
        return body.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def validate_response_size(
    response: httpx.Response, max_size_bytes: int, service_name: str
) -> None:
    """Check both the declared and the actual size of an already-read response.

    Raises:
        ResponseSizeError: If either size exceeds ``max_size_bytes``.
    """
    check_declared_size(response, max_size_bytes, service_name)
    actual_size = len(response.content)
    if actual_size > max_size_bytes:
        msg = (
            f"{service_name} response size ({actual_size} bytes) "
            f"exceeds limit ({max_size_bytes} bytes)"
        )
        raise ResponseSizeError(msg, actual_size=actual_size, max_size=max_size_bytes)


def is_transient_status(status_code: int | None) -> bool:
    """Return True for HTTP statuses worth retrying (timeouts, rate limits, overload)."""
    return status_code in TRANSIENT_STATUS_CODES
