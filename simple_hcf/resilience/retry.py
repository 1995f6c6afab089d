"""Retry with a fixed schedule or exponential backoff + full jitter.

Design decisions:
- Only handled exceptions (transport errors by default) and responses that
  match the result predicate (5xx / 408 by default) trigger a retry; a 400 is
  returned as-is so application bugs are not masked
- On exhaustion the last response is handed back unchanged, or the last
  exception re-raised, so callers see exactly what the server said
- retry_budget is threaded as a mutable int so callers can share a budget
  across several clients working on behalf of one logical operation
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from simple_hcf.observability.metrics import RETRY_ATTEMPTS
from simple_hcf.pipeline import Policy, Send

logger = logging.getLogger(__name__)

DEFAULT_HANDLED_EXCEPTIONS: tuple[type[BaseException], ...] = (
    httpx.TransportError,
    ConnectionError,
)


def is_transient_response(response: httpx.Response) -> bool:
    """Server errors and 408 Request Timeout."""
    return response.status_code >= 500 or response.status_code == 408


@dataclass(frozen=True)
class RetryEvent:
    attempt: int                       # 1 for the first retry
    delay: float                       # seconds slept before the retry
    response: Optional[httpx.Response] = None
    exception: Optional[BaseException] = None


@dataclass
class RetryConfig:
    retries: int = 3               # retries after the initial attempt
    base_delay: float = 0.1        # seconds
    max_delay: float = 30.0        # seconds
    multiplier: float = 2.0
    jitter: bool = True
    # Fixed schedule: retry attempt (1-based) -> seconds.  Overrides backoff.
    sleep_durations: Optional[Callable[[int], float]] = None
    handle_exceptions: tuple[type[BaseException], ...] = DEFAULT_HANDLED_EXCEPTIONS
    handle_result: Callable[[httpx.Response], bool] = is_transient_response
    # Shared retry budget; mutable single-element list.  None = unlimited.
    retry_budget: Optional[list[int]] = None
    on_retry: Optional[Callable[[RetryEvent], Any]] = None

    @classmethod
    def fixed(cls, retries: int, delay: float, **kwargs: Any) -> "RetryConfig":
        """Wait *delay* seconds before every retry."""
        return cls(retries=retries, sleep_durations=lambda _attempt: delay, **kwargs)


async def retry_with_backoff(
    func: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig,
    *,
    operation: str = "unknown",
) -> httpx.Response:
    """Execute *func* with retry logic defined by *config*.

    Returns the last response or raises the last handled exception once
    retries are exhausted.  Unhandled exceptions propagate immediately.
    """
    attempt = 0
    while True:
        response: Optional[httpx.Response] = None
        try:
            response = await func()
        except config.handle_exceptions as exc:
            if not _may_retry(attempt, config, operation):
                raise
            event = RetryEvent(attempt + 1, _retry_delay(attempt + 1, config), exception=exc)
            reason = type(exc).__name__
            logger.info(
                "retrying_after_error",
                extra={
                    "attempt": event.attempt,
                    "error": str(exc),
                    "delay": event.delay,
                    "operation": operation,
                },
            )
        else:
            if not config.handle_result(response) or not _may_retry(attempt, config, operation):
                return response
            event = RetryEvent(attempt + 1, _retry_delay(attempt + 1, config), response=response)
            reason = str(response.status_code)
            logger.info(
                "retrying_request",
                extra={
                    "attempt": event.attempt,
                    "status_code": response.status_code,
                    "delay": event.delay,
                    "operation": operation,
                },
            )

        attempt += 1
        RETRY_ATTEMPTS.labels(operation=operation, reason=reason).inc()
        if config.retry_budget is not None:
            config.retry_budget[0] -= 1
        if config.on_retry is not None:
            outcome = config.on_retry(event)
            if inspect.isawaitable(outcome):
                await outcome
        await asyncio.sleep(event.delay)


def retry_policy(config: Optional[RetryConfig] = None, *, operation: str = "http") -> Policy:
    """Policy that re-sends the request through everything it wraps."""
    config = config or RetryConfig()

    def _policy(send: Send) -> Send:
        async def _send(request: httpx.Request) -> httpx.Response:
            return await retry_with_backoff(lambda: send(request), config, operation=operation)

        return _send

    return _policy


def _may_retry(attempt: int, config: RetryConfig, operation: str) -> bool:
    if attempt >= config.retries:
        logger.warning(
            "retries_exhausted",
            extra={"attempts": attempt + 1, "operation": operation},
        )
        return False
    if config.retry_budget is not None and config.retry_budget[0] <= 0:
        logger.warning("retry_budget_exhausted", extra={"operation": operation})
        return False
    return True


def _retry_delay(attempt: int, config: RetryConfig) -> float:
    """Delay before retry number *attempt* (1-based)."""
    if config.sleep_durations is not None:
        return max(0.0, config.sleep_durations(attempt))
    base = min(config.base_delay * (config.multiplier ** (attempt - 1)), config.max_delay)
    if config.jitter:
        return random.uniform(0, base)
    return base
