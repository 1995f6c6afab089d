"""Constants and small doubles shared by the test modules."""
from __future__ import annotations

ENDPOINT = "/hello/world"
ENDPOINT_TIMEOUT = "/timeout"
ENDPOINT_SLOW = "/slow"


class FakeClock:
    """Controllable clock for deterministic time-based tests."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += float(seconds)
