"""Per-request cancellation context."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from issues_dashboard.errors import RequestCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.1


@dataclass
class RequestContext:
    """Carries a deadline and a cancel flag through one resolution.

    The resolver calls :meth:`check` before each cache call and each visited
    issue so an abandoned request stops talking to the store promptly.
    """

    deadline: float | None = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def with_timeout(cls, seconds: float | None) -> RequestContext:
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self.cancel_event.set()

    def check(self) -> None:
        if self.cancel_event.is_set():
            raise RequestCancelled("request was cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise RequestCancelled("request deadline exceeded")


class Disconnectable(Protocol):
    """Anything that can report a gone client, such as a Starlette ``Request``."""

    async def is_disconnected(self) -> bool: ...


async def run_until_disconnected(
    context: RequestContext,
    work: Callable[[], T],
    client: Disconnectable,
    *,
    poll_seconds: float = DISCONNECT_POLL_SECONDS,
) -> T:
    """Run blocking ``work`` in a worker thread, cancelling ``context`` if the client leaves.

    The work sees the cancellation at its next :meth:`RequestContext.check`
    and raises :class:`RequestCancelled`, which is re-raised here.
    """
    task = asyncio.ensure_future(asyncio.to_thread(work))
    while True:
        done, _ = await asyncio.wait({task}, timeout=poll_seconds)
        if done:
            return task.result()
        if await client.is_disconnected():
            logger.info("Client disconnected; cancelling request")
            context.cancel()
            return await task
