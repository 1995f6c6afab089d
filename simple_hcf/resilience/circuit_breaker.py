"""Circuit breaker policy.

States:
- CLOSED  – normal operation; failure counter accumulates
- OPEN    – all calls rejected immediately (fast fail)
- HALF_OPEN – probe calls allowed; success→CLOSED, failure→OPEN

A failure is either a handled exception or a response matching the result
predicate.  State is per breaker instance, so share one breaker across the
clients that talk to the same downstream.
"""
from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx

from simple_hcf.exceptions import BrokenCircuitError
from simple_hcf.observability.metrics import BREAKER_STATE, BREAKER_OPEN_TOTAL
from simple_hcf.pipeline import Policy, Send
from simple_hcf.resilience.retry import DEFAULT_HANDLED_EXCEPTIONS, is_transient_response

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


_STATE_GAUGE = {CircuitState.CLOSED: 0, CircuitState.OPEN: 1, CircuitState.HALF_OPEN: 2}


class CircuitBreaker:
    """Rolling-window circuit breaker.

    Args:
        name: human-readable name (used for metrics labels)
        failure_threshold: number of failures in window before opening
        success_threshold: consecutive successes in HALF_OPEN to close
        open_duration: seconds to stay OPEN before moving to HALF_OPEN
        window_size: rolling window in seconds for failure counting
        handle_exceptions: exceptions that count as failures
        handle_result: responses that count as failures
        clock: monotonic time source, replaceable in tests
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        success_threshold: int = 2,
        open_duration: float = 30.0,
        window_size: float = 60.0,
        handle_exceptions: tuple[type[BaseException], ...] = DEFAULT_HANDLED_EXCEPTIONS,
        handle_result: Callable[[httpx.Response], bool] = is_transient_response,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.open_duration = open_duration
        self.window_size = window_size
        self.handle_exceptions = handle_exceptions
        self.handle_result = handle_result
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failures: list[float] = []  # timestamps
        self._successes_in_half_open = 0
        self._opened_at: Optional[float] = None
        self._lock = asyncio.Lock()

        BREAKER_STATE.labels(downstream=name).set(0)

    async def call(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        """Execute *func* through the breaker."""
        state = await self._get_state()

        if state == CircuitState.OPEN:
            logger.warning("circuit_breaker_open", extra={"breaker": self.name})
            raise BrokenCircuitError(self.name, retry_after=self._retry_after())

        try:
            response = await func()
        except self.handle_exceptions:
            await self._on_failure()
            raise

        if self.handle_result(response):
            await self._on_failure()
        else:
            await self._on_success()
        return response

    async def reset(self) -> None:
        async with self._lock:
            self._set_state(CircuitState.CLOSED)
            self._failures = []
            self._opened_at = None

    async def _get_state(self) -> CircuitState:
        async with self._lock:
            if self._state == CircuitState.OPEN:
                if self._opened_at is not None and (self._clock() - self._opened_at) >= self.open_duration:
                    logger.info("circuit_breaker_half_open", extra={"breaker": self.name})
                    self._set_state(CircuitState.HALF_OPEN)
                    self._successes_in_half_open = 0
            elif self._state == CircuitState.CLOSED:
                self._prune_window()
            return self._state

    async def _on_success(self) -> None:
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._successes_in_half_open += 1
                if self._successes_in_half_open >= self.success_threshold:
                    logger.info("circuit_breaker_closed", extra={"breaker": self.name})
                    self._set_state(CircuitState.CLOSED)
                    self._failures = []

    async def _on_failure(self) -> None:
        async with self._lock:
            now = self._clock()
            if self._state == CircuitState.HALF_OPEN:
                # Single failure in half-open re-opens the breaker
                self._trip(now)
                return
            self._failures.append(now)
            self._prune_window()
            if len(self._failures) >= self.failure_threshold:
                self._trip(now)

    def _trip(self, now: float) -> None:
        self._set_state(CircuitState.OPEN)
        self._opened_at = now
        BREAKER_OPEN_TOTAL.labels(downstream=self.name).inc()
        logger.error("circuit_breaker_tripped", extra={"breaker": self.name})

    def _set_state(self, state: CircuitState) -> None:
        self._state = state
        BREAKER_STATE.labels(downstream=self.name).set(_STATE_GAUGE[state])

    def _prune_window(self) -> None:
        cutoff = self._clock() - self.window_size
        self._failures = [t for t in self._failures if t > cutoff]

    def _retry_after(self) -> Optional[float]:
        if self._opened_at is None:
            return None
        return max(0.0, self.open_duration - (self._clock() - self._opened_at))

    @property
    def state(self) -> CircuitState:
        return self._state


def circuit_breaker_policy(breaker: CircuitBreaker) -> Policy:
    def _policy(send: Send) -> Send:
        async def _send(request: httpx.Request) -> httpx.Response:
            return await breaker.call(lambda: send(request))

        return _send

    return _policy
