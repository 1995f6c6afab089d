"""Observability library: logging, metrics, tracing."""

from .logging import setup_logging, correlation_id_var
from .metrics import (
    CLIENT_REQUESTS_TOTAL,
    CLIENT_ERRORS_TOTAL,
    CLIENT_REQUEST_DURATION,
    RETRY_ATTEMPTS,
    POLICY_TIMEOUTS,
    BREAKER_STATE,
    BREAKER_OPEN_TOTAL,
    BULKHEAD_REJECTIONS,
)
from .tracing import setup_tracing, get_tracer

from simple_hcf.config import ClientSettings


def setup_observability(settings: ClientSettings) -> None:
    """Configure JSON logging and tracing for the service named in *settings*."""
    setup_logging(settings.log_level, settings.service_name)
    setup_tracing(settings.service_name)


__all__ = [
    "setup_observability",
    "setup_logging",
    "correlation_id_var",
    "CLIENT_REQUESTS_TOTAL",
    "CLIENT_ERRORS_TOTAL",
    "CLIENT_REQUEST_DURATION",
    "RETRY_ATTEMPTS",
    "POLICY_TIMEOUTS",
    "BREAKER_STATE",
    "BREAKER_OPEN_TOTAL",
    "BULKHEAD_REJECTIONS",
    "setup_tracing",
    "get_tracer",
]
