"""Scripted HTTP endpoint for exercising pipelines without a network.

Stubs are matched on method and path, first registered first.  A stub that
belongs to a scenario only matches while the scenario is in its
``when_state`` (``"Started"`` unless given), and moves the scenario to
``set_state`` after it responds.  That is enough to script "408 once, then
200" style sequences deterministically.

The app is a regular FastAPI application; ``transport()`` serves it
in-process through httpx.ASGITransport.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import httpx
from fastapi import FastAPI, Request, Response
from pydantic import BaseModel

logger = logging.getLogger(__name__)

STARTED = "Started"
ADMIN_PREFIX = "/__admin"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@dataclass
class Stub:
    path: str
    method: str = "GET"
    status: int = 200
    body: Union[str, bytes] = b""
    headers: dict[str, str] = field(default_factory=dict)
    scenario: Optional[str] = None
    when_state: Optional[str] = None
    set_state: Optional[str] = None
    delay: float = 0.0

    def matches(self, method: str, path: str, scenarios: dict[str, str]) -> bool:
        if self.method != method or self.path != path:
            return False
        if self.scenario is None:
            return True
        return scenarios.get(self.scenario, STARTED) == (self.when_state or STARTED)


@dataclass
class LogEntry:
    method: str
    path: str
    headers: dict[str, str]
    body: bytes
    status_code: int
    matched: bool


class LogEntryModel(BaseModel):
    method: str
    path: str
    status_code: int
    matched: bool
    headers: dict[str, str]


class ResetResult(BaseModel):
    cleared_requests: int


class ScriptedServer:
    def __init__(self, base_url: str = "http://scripted.test") -> None:
        self.base_url = base_url.rstrip("/")
        self.log_entries: list[LogEntry] = []
        self._stubs: list[Stub] = []
        self._scenarios: dict[str, str] = {}
        self.app = self._create_app()

    def stub(
        self,
        path: str,
        *,
        method: str = "GET",
        status: int = 200,
        body: Union[str, bytes] = b"",
        headers: Optional[dict[str, str]] = None,
        scenario: Optional[str] = None,
        when_state: Optional[str] = None,
        set_state: Optional[str] = None,
        delay: float = 0.0,
    ) -> Stub:
        if (when_state or set_state) and scenario is None:
            raise ValueError("when_state/set_state need a scenario")
        stub = Stub(
            path=path,
            method=method.upper(),
            status=status,
            body=body,
            headers=dict(headers or {}),
            scenario=scenario,
            when_state=when_state,
            set_state=set_state,
            delay=delay,
        )
        self._stubs.append(stub)
        return stub

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def transport(self) -> httpx.AsyncBaseTransport:
        return httpx.ASGITransport(app=self.app)

    def scenario_state(self, scenario: str) -> str:
        return self._scenarios.get(scenario, STARTED)

    def reset(self) -> int:
        """Forget logged requests and rewind every scenario; stubs stay."""
        cleared = len(self.log_entries)
        self.log_entries.clear()
        self._scenarios.clear()
        return cleared

    def entries_with_status(self, status_code: int) -> list[LogEntry]:
        return [entry for entry in self.log_entries if entry.status_code == status_code]

    def _match(self, method: str, path: str) -> Optional[Stub]:
        for stub in self._stubs:
            if stub.matches(method, path, self._scenarios):
                if stub.scenario is not None and stub.set_state is not None:
                    self._scenarios[stub.scenario] = stub.set_state
                return stub
        return None

    def _create_app(self) -> FastAPI:
        app = FastAPI(title="Scripted server", version="1.0.0")

        @app.get(f"{ADMIN_PREFIX}/requests", response_model=list[LogEntryModel])
        async def list_requests():
            return [
                LogEntryModel(
                    method=entry.method,
                    path=entry.path,
                    status_code=entry.status_code,
                    matched=entry.matched,
                    headers=entry.headers,
                )
                for entry in self.log_entries
            ]

        @app.post(f"{ADMIN_PREFIX}/reset", response_model=ResetResult)
        async def reset():
            return ResetResult(cleared_requests=self.reset())

        @app.api_route("/{path:path}", methods=ALL_METHODS)
        async def respond(path: str, request: Request):
            body = await request.body()
            stub = self._match(request.method, request.url.path)
            status_code = stub.status if stub is not None else 404
            self.log_entries.append(
                LogEntry(
                    method=request.method,
                    path=request.url.path,
                    headers=dict(request.headers),
                    body=body,
                    status_code=status_code,
                    matched=stub is not None,
                )
            )
            if stub is None:
                logger.warning(
                    "scripted_server_unmatched",
                    extra={"method": request.method, "path": request.url.path},
                )
                return Response(content="No stub matched", status_code=404, media_type="text/plain")
            if stub.delay:
                await asyncio.sleep(stub.delay)
            return Response(content=stub.body, status_code=stub.status, headers=stub.headers)

        return app
