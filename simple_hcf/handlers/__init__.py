"""Message handlers: pipeline stages that see each request before it is sent."""

from .events import RequestEvent, RequestEventHandler
from .traffic import TrafficRecorderHandler
from .headers import (
    header_handler,
    idempotency_key_handler,
    deadline_handler,
    IDEMPOTENCY_HEADER,
)
from .observability import ObservabilityHandler, CORRELATION_HEADER

__all__ = [
    "RequestEvent",
    "RequestEventHandler",
    "TrafficRecorderHandler",
    "header_handler",
    "idempotency_key_handler",
    "deadline_handler",
    "IDEMPOTENCY_HEADER",
    "ObservabilityHandler",
    "CORRELATION_HEADER",
]
