"""Bulkhead: semaphore-based concurrency limiter per downstream.

Prevents one slow downstream from exhausting every connection a process has.
Each downstream gets its own asyncio.Semaphore so a spike of calls to one
service cannot starve calls to another.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from simple_hcf.exceptions import BulkheadRejectedError
from simple_hcf.observability.metrics import BULKHEAD_REJECTIONS
from simple_hcf.pipeline import Policy, Send

logger = logging.getLogger(__name__)


class Bulkhead:
    """Async semaphore bulkhead.

    Args:
        name: identifies the downstream (for metrics/logs)
        max_concurrent: maximum simultaneous in-flight requests
        max_wait: seconds to wait for a semaphore slot before rejecting
    """

    def __init__(
        self,
        name: str,
        max_concurrent: int = 20,
        max_wait: float = 1.0,
    ) -> None:
        self.name = name
        self.max_concurrent = max_concurrent
        self.max_wait = max_wait
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._inflight = 0

    async def call(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        """Execute *func* within the bulkhead, rejecting if at capacity."""
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=self.max_wait)
        except asyncio.TimeoutError:
            BULKHEAD_REJECTIONS.labels(downstream=self.name).inc()
            logger.warning(
                "bulkhead_rejected",
                extra={"downstream": self.name, "max_concurrent": self.max_concurrent},
            )
            raise BulkheadRejectedError(self.name, self.max_concurrent) from None
        self._inflight += 1
        try:
            return await func()
        finally:
            self._inflight -= 1
            self._semaphore.release()

    @property
    def available_slots(self) -> int:
        return self.max_concurrent - self._inflight


def bulkhead_policy(bulkhead: Bulkhead) -> Policy:
    def _policy(send: Send) -> Send:
        async def _send(request: httpx.Request) -> httpx.Response:
            return await bulkhead.call(lambda: send(request))

        return _send

    return _policy
