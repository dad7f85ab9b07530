"""
Cooperative cancellation for in-flight requests.

A CancellationToken is created by the caller and handed to a request. The
transport races the network call against the token, and the orchestrator
checks it before each attempt and while sleeping between attempts.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

import structlog

from api_dispatch.dispatch.exceptions import CancellationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CancellationToken:
    """
    One-shot cancellation signal.

    Usage:
        token = CancellationToken()
        task = asyncio.create_task(client.get("/rooms", cancel_token=token))
        token.cancel("user navigated away")
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "Request was cancelled") -> None:
        """Fire the token. Subsequent calls are no-ops."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        logger.debug("Cancellation token fired", reason=reason)

    def cancel_after(self, delay_ms: int) -> None:
        """
        Fire the token after `delay_ms` milliseconds.

        Wiring the token to the same deadline as the request timeout makes the
        timeout also abort the underlying transport call.
        """
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(
            delay_ms / 1000.0, self.cancel, f"Request aborted after {delay_ms}ms"
        )

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise CancellationError(self._reason or "Request was cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


async def race_cancellation(awaitable: Awaitable[T], token: Optional[CancellationToken]) -> T:
    """
    Await `awaitable`, raising CancellationError as soon as `token` fires.

    The losing side is cancelled, so a cancelled token really stops the work.
    """
    if token is None:
        return await awaitable

    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        token.raise_if_cancelled()

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work in done:
        waiter.cancel()
        return work.result()

    work.cancel()
    try:
        await work
    except asyncio.CancelledError:
        pass
    except Exception as exc:
        # The work failed while being cancelled; cancellation still wins
        logger.debug("Cancelled work raised during teardown", error=str(exc))
    raise CancellationError(token.reason or "Request was cancelled")
