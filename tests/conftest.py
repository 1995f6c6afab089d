"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import pytest

from simple_hcf.resilience import RetryConfig
from simple_hcf.testing import ScriptedServer

from tests.helpers import ENDPOINT, ENDPOINT_SLOW, ENDPOINT_TIMEOUT, FakeClock


@pytest.fixture
def server() -> ScriptedServer:
    """Endpoint answering 408 once then 200 on ENDPOINT, always 408 on ENDPOINT_TIMEOUT."""
    server = ScriptedServer()
    server.stub(
        ENDPOINT,
        status=408,
        scenario="Timeout-then-resolved",
        set_state="Transient issue resolved",
    )
    server.stub(
        ENDPOINT,
        status=200,
        body="Hello world!",
        headers={"Content-Type": "text/plain"},
        scenario="Timeout-then-resolved",
        when_state="Transient issue resolved",
        set_state="All ok",
    )
    server.stub(ENDPOINT_TIMEOUT, status=408)
    server.stub(ENDPOINT_SLOW, status=200, body="late", delay=0.5)
    return server


@pytest.fixture
def fast_retry() -> RetryConfig:
    """Three retries with a fixed, near-zero wait."""
    return RetryConfig.fixed(3, 0.001)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=1000.0)
