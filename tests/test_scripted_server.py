"""Tests for the scripted endpoint used by the pipeline tests."""
from __future__ import annotations

import httpx
import pytest

from simple_hcf.testing import STARTED, ScriptedServer

from tests.helpers import ENDPOINT


async def _get(server: ScriptedServer, path: str, method: str = "GET") -> httpx.Response:
    async with httpx.AsyncClient(transport=server.transport(), base_url=server.base_url) as client:
        return await client.request(method, path)


class TestScenarios:
    @pytest.mark.asyncio
    async def test_scenario_steps_through_states(self, server) -> None:
        assert server.scenario_state("Timeout-then-resolved") == STARTED

        first = await _get(server, ENDPOINT)
        assert server.scenario_state("Timeout-then-resolved") == "Transient issue resolved"
        second = await _get(server, ENDPOINT)

        assert first.status_code == 408
        assert second.status_code == 200
        assert second.text == "Hello world!"
        assert second.headers["content-type"].startswith("text/plain")
        assert server.scenario_state("Timeout-then-resolved") == "All ok"

    @pytest.mark.asyncio
    async def test_exhausted_scenario_returns_404(self, server) -> None:
        for _ in range(2):
            await _get(server, ENDPOINT)

        third = await _get(server, ENDPOINT)

        assert third.status_code == 404
        assert server.log_entries[-1].matched is False

    @pytest.mark.asyncio
    async def test_method_must_match(self, server) -> None:
        response = await _get(server, "/timeout", method="POST")

        assert response.status_code == 404

    def test_state_without_scenario_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScriptedServer().stub("/x", set_state="next")

    @pytest.mark.asyncio
    async def test_stubs_without_scenario_always_match(self) -> None:
        server = ScriptedServer()
        server.stub("/ping", body=b"pong")

        responses = [await _get(server, "/ping") for _ in range(3)]

        assert [r.text for r in responses] == ["pong"] * 3


class TestRequestLog:
    @pytest.mark.asyncio
    async def test_log_records_status_and_headers(self, server) -> None:
        async with httpx.AsyncClient(transport=server.transport()) as client:
            await client.get(server.url(ENDPOINT), headers={"foobar": "foobar"})

        entry = server.log_entries[0]
        assert entry.method == "GET"
        assert entry.path == ENDPOINT
        assert entry.status_code == 408
        assert entry.headers["foobar"] == "foobar"
        assert server.entries_with_status(408) == [entry]

    @pytest.mark.asyncio
    async def test_admin_endpoints(self, server) -> None:
        await _get(server, ENDPOINT)

        listed = await _get(server, "/__admin/requests")
        assert listed.status_code == 200
        assert [(e["path"], e["status_code"]) for e in listed.json()] == [(ENDPOINT, 408)]

        reset = await _get(server, "/__admin/reset", method="POST")
        assert reset.json() == {"cleared_requests": 1}
        assert server.log_entries == []
        assert server.scenario_state("Timeout-then-resolved") == STARTED

    @pytest.mark.asyncio
    async def test_admin_requests_are_not_logged(self, server) -> None:
        await _get(server, "/__admin/requests")

        assert server.log_entries == []
