"""Handler that records every request it sees in a shared, ordered log."""
from __future__ import annotations

from typing import Optional

import httpx

from simple_hcf.pipeline import Send


class TrafficRecorderHandler:
    """Append each observed request to ``traffic`` and forward it unchanged.

    The log may be shared between several recorders or clients.  Appends
    happen before the first await, so concurrent requests on one event loop
    never interleave inside an append.
    """

    def __init__(
        self,
        visited: Optional[list[str]] = None,
        traffic: Optional[list[httpx.Request]] = None,
        name: str = "traffic",
    ) -> None:
        self.name = name
        self._visited = visited
        self.traffic: list[httpx.Request] = traffic if traffic is not None else []

    async def __call__(self, request: httpx.Request, next_send: Send) -> httpx.Response:
        if self._visited is not None:
            self._visited.append(self.name)
        self.traffic.append(request)
        return await next_send(request)

    def clear(self) -> None:
        self.traffic.clear()
