"""Timeout policy with deadline helpers.

The policy races each call against a timer and cancels it on expiry, raising
TimeoutRejectedError instead of waiting for the cancelled attempt to finish.
Per-hop socket timeouts stay on the httpx client (see ClientSettings).

The overall request deadline can be propagated via the X-Request-Deadline
header so downstream services can stop work once the caller has given up.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from simple_hcf.exceptions import PipelineConfigurationError, TimeoutRejectedError
from simple_hcf.observability.metrics import POLICY_TIMEOUTS
from simple_hcf.pipeline import Policy, Send

logger = logging.getLogger(__name__)

DEADLINE_HEADER = "X-Request-Deadline"


@dataclass
class TimeoutConfig:
    # Per-attempt budget in seconds
    timeout: float = 10.0
    # Overall deadline (absolute epoch time); None = no limit
    deadline: Optional[float] = None

    def remaining_seconds(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.time())

    def effective_timeout(self) -> float:
        """Per-attempt timeout shrunk to whatever is left of the deadline."""
        remaining = self.remaining_seconds()
        if remaining is None:
            return self.timeout
        return min(self.timeout, remaining)


async def with_timeout(
    func: Callable[[], Awaitable[Any]],
    timeout_seconds: float,
    *,
    operation: str = "unknown",
) -> Any:
    """Run *func* with a hard timeout, raising TimeoutRejectedError on breach."""
    try:
        return await asyncio.wait_for(func(), timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        POLICY_TIMEOUTS.labels(operation=operation).inc()
        logger.warning(
            "operation_timed_out",
            extra={"operation": operation, "timeout": timeout_seconds},
        )
        raise TimeoutRejectedError(timeout_seconds, operation) from exc


def timeout_policy(timeout: float | TimeoutConfig, *, operation: str = "http") -> Policy:
    """Policy that cancels the wrapped call after *timeout* seconds."""
    config = timeout if isinstance(timeout, TimeoutConfig) else TimeoutConfig(timeout=timeout)
    if config.timeout <= 0:
        raise PipelineConfigurationError(f"timeout must be positive, got {config.timeout!r}")

    def _policy(send: Send) -> Send:
        async def _send(request: httpx.Request) -> httpx.Response:
            return await with_timeout(
                lambda: send(request),
                config.effective_timeout(),
                operation=operation,
            )

        return _send

    return _policy
