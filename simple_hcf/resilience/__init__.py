"""Resilience policies: retries, timeouts, circuit breakers, bulkheads."""

from .retry import (
    retry_policy,
    retry_with_backoff,
    RetryConfig,
    RetryEvent,
    is_transient_response,
)
from .timeout import timeout_policy, with_timeout, TimeoutConfig, DEADLINE_HEADER
from .circuit_breaker import circuit_breaker_policy, CircuitBreaker, CircuitState
from .bulkhead import bulkhead_policy, Bulkhead

__all__ = [
    "retry_policy",
    "retry_with_backoff",
    "RetryConfig",
    "RetryEvent",
    "is_transient_response",
    "timeout_policy",
    "with_timeout",
    "TimeoutConfig",
    "DEADLINE_HEADER",
    "circuit_breaker_policy",
    "CircuitBreaker",
    "CircuitState",
    "bulkhead_policy",
    "Bulkhead",
]
