"""The client produced by PipelineBuilder.build()."""
from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from simple_hcf.pipeline import MessageHandler, Policy, Send, build_pipeline

logger = logging.getLogger(__name__)


class PipelineClient:
    """Async HTTP client whose sends run through policies and handlers.

    Configuration is fixed at construction.  The client keeps no per-request
    state, so one instance can serve many concurrent requests.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        policies: Sequence[Policy] = (),
        handlers: Sequence[MessageHandler] = (),
    ) -> None:
        self._http = http
        self._policies = tuple(policies)
        self._handlers = tuple(handlers)
        self._send: Send = build_pipeline(self._policies, self._handlers, self._transport_send)

    @property
    def policies(self) -> tuple[Policy, ...]:
        return self._policies

    @property
    def handlers(self) -> tuple[MessageHandler, ...]:
        return self._handlers

    @property
    def base_url(self) -> httpx.URL:
        return self._http.base_url

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def send(self, request: httpx.Request) -> httpx.Response:
        return await self._send(request)

    def build_request(self, method: str, url: httpx.URL | str, **kwargs: Any) -> httpx.Request:
        return self._http.build_request(method, url, **kwargs)

    async def request(self, method: str, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.send(self.build_request(method, url, **kwargs))

    async def get(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def head(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("HEAD", url, **kwargs)

    async def options(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("OPTIONS", url, **kwargs)

    async def post(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "PipelineClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _transport_send(self, request: httpx.Request) -> httpx.Response:
        # Bodies are read eagerly so retried responses never hold a connection
        return await self._http.send(request)
