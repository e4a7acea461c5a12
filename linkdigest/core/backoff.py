"""Shared exponential backoff with jitter.

Used by both LLM provider variants so the retry delay algorithm lives in one place.
"""

from __future__ import annotations

import asyncio
import random


def backoff_delay(attempt: int, backoff_base: float = 0.5, max_delay: float = 30.0) -> float:
    """Return the jittered delay for a 0-indexed retry ``attempt``.

    Delay formula: ``min(max_delay, max(0, backoff_base * 2^attempt)) * (1 + uniform(-0.25, 0.25))``
    """
    base_delay = min(max_delay, max(0.0, backoff_base * (2**attempt)))
    jitter = 1.0 + random.uniform(-0.25, 0.25)
    return base_delay * jitter


async def sleep_backoff(
    attempt: int,
    backoff_base: float = 0.5,
    max_delay: float = 30.0,
) -> None:
    """Sleep with exponential backoff and jitter.

    Args:
        attempt: Current attempt number (0-indexed).
        backoff_base: Base delay in seconds. ``0`` disables the wait entirely.
        max_delay: Maximum base delay in seconds.
    """
    delay = backoff_delay(attempt, backoff_base, max_delay)
    if delay > 0:
        await asyncio.sleep(delay)
