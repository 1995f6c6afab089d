"""Exceptions raised by the pipeline itself.

Transport failures are left as the ``httpx`` exceptions the transport raised,
and qualifying status codes are always returned as responses.  Only the
policies and the builder raise the types below.
"""
from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for errors raised by simple_hcf."""


class PipelineConfigurationError(PipelineError, ValueError):
    """A builder was given something it cannot put in a pipeline."""


class TimeoutRejectedError(PipelineError):
    """The timeout policy cancelled an attempt that ran past its deadline."""

    def __init__(self, timeout: float, operation: str = "unknown") -> None:
        super().__init__(f"{operation} timed out after {timeout:g}s")
        self.timeout = timeout
        self.operation = operation


class BrokenCircuitError(PipelineError):
    """The circuit breaker is open and rejected the call without sending it."""

    def __init__(self, name: str, retry_after: Optional[float] = None) -> None:
        super().__init__(f"Circuit breaker OPEN for {name}")
        self.name = name
        self.retry_after = retry_after


class BulkheadRejectedError(PipelineError):
    """No bulkhead slot became free within the configured wait."""

    def __init__(self, name: str, max_concurrent: int) -> None:
        super().__init__(f"Bulkhead full for {name} (max {max_concurrent})")
        self.name = name
        self.max_concurrent = max_concurrent
