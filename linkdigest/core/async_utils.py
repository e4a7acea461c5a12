"""Async helper utilities."""

from __future__ import annotations

import asyncio
import contextlib


def raise_if_cancelled(exc: BaseException) -> None:
    """Re-raise ``asyncio.CancelledError`` instances to preserve cancellation semantics."""

    if isinstance(exc, asyncio.CancelledError):  # pragma: no cover - simple guard
        raise exc


async def cancel_and_wait(task: asyncio.Task | None, *, timeout: float = 5.0) -> None:
    """Cancel ``task`` and wait for it to unwind, ignoring its cancellation."""
    if task is None or task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError, TimeoutError):
        await asyncio.wait_for(task, timeout=timeout)
