"""
Per-attempt deadline enforcement.

The guard races an attempt against a deadline. When the deadline wins it
raises RequestTimeoutError and stops waiting, but leaves the attempt running:
its eventual result or exception is consumed in the background. To actually
abort the transport call, wire a CancellationToken to the same deadline
(CancellationToken.cancel_after).
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

import structlog

from api_dispatch.dispatch.exceptions import RequestTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Strong references to attempts abandoned by the guard, so they are not
# garbage-collected mid-flight
_abandoned: set[asyncio.Future] = set()


def _consume_abandoned(task: asyncio.Future) -> None:
    _abandoned.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(
            "Abandoned attempt failed after timeout",
            error=str(exc),
            error_type=type(exc).__name__,
        )


async def with_timeout(awaitable: Awaitable[T], timeout_ms: Optional[int]) -> T:
    """
    Await `awaitable` with a hard deadline of `timeout_ms` milliseconds.

    None or a non-positive value disables the guard.

    Raises:
        RequestTimeoutError: The deadline expired first
    """
    if not timeout_ms or timeout_ms <= 0:
        return await awaitable

    attempt = asyncio.ensure_future(awaitable)
    try:
        done, _ = await asyncio.wait({attempt}, timeout=timeout_ms / 1000.0)
    except asyncio.CancelledError:
        attempt.cancel()
        raise

    if attempt in done:
        return attempt.result()

    _abandoned.add(attempt)
    attempt.add_done_callback(_consume_abandoned)
    logger.debug("Attempt exceeded deadline", timeout_ms=timeout_ms)
    raise RequestTimeoutError(timeout_ms)


def abandoned_attempts() -> int:
    """Number of timed-out attempts still running in the background."""
    return len(_abandoned)
