"""Handler that publishes every outbound request to explicit subscribers.

Subscribers are either callbacks (sync or async) registered with
``subscribe`` or queues obtained from ``listen()``.  Each invocation of the
handler produces exactly one RequestEvent, so a request retried three times
produces four events.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional

import httpx

from simple_hcf.pipeline import Send

logger = logging.getLogger(__name__)

RequestCallback = Callable[["RequestEvent"], Any]


@dataclass(frozen=True)
class RequestEvent:
    request: httpx.Request
    # Snapshot taken when the handler ran; later handlers may add more
    headers: httpx.Headers
    sequence: int


class RequestEventHandler:
    """Emit a RequestEvent for each request before forwarding it."""

    def __init__(self, visited: Optional[list[str]] = None, name: str = "events") -> None:
        self.name = name
        self._visited = visited
        self._callbacks: list[RequestCallback] = []
        self._queues: list[asyncio.Queue[RequestEvent]] = []
        # Only state kept across requests; incremented before any await
        self._sequence = 0

    def subscribe(self, callback: RequestCallback) -> Callable[[], None]:
        """Register *callback*; returns a function that unsubscribes it."""
        self._callbacks.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: RequestCallback) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass

    @asynccontextmanager
    async def listen(self) -> AsyncIterator[asyncio.Queue[RequestEvent]]:
        """Yield a queue receiving every event raised while the block is open."""
        queue: asyncio.Queue[RequestEvent] = asyncio.Queue()
        self._queues.append(queue)
        try:
            yield queue
        finally:
            self._queues.remove(queue)

    async def __call__(self, request: httpx.Request, next_send: Send) -> httpx.Response:
        if self._visited is not None:
            self._visited.append(self.name)
        self._sequence += 1
        event = RequestEvent(
            request=request,
            headers=httpx.Headers(request.headers),
            sequence=self._sequence,
        )
        await self._publish(event)
        return await next_send(request)

    async def _publish(self, event: RequestEvent) -> None:
        logger.debug(
            "request_event",
            extra={"handler": self.name, "sequence": event.sequence, "url": str(event.request.url)},
        )
        for queue in list(self._queues):
            queue.put_nowait(event)
        for callback in list(self._callbacks):
            outcome = callback(event)
            if inspect.isawaitable(outcome):
                await outcome
