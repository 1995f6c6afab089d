"""Structured JSON logging setup.

Every log record includes:
- timestamp (ISO-8601)
- level
- logger name
- service name (ClientSettings.service_name unless given)
- correlation_id (from contextvars, set by the observability handler)
- trace_id / span_id (if an OpenTelemetry span is active)
- message
- any extra kwargs
"""
from __future__ import annotations

import json
import logging
import sys
import time
from contextvars import ContextVar

from opentelemetry import trace as otel_trace

from simple_hcf.config import ClientSettings

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
SERVICE_NAME = ClientSettings.service_name

_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = SERVICE_NAME) -> None:
        super().__init__()
        self._service = service_name

    def format(self, record: logging.LogRecord) -> str:
        trace_id = ""
        span_id = ""
        ctx = otel_trace.get_current_span().get_span_context()
        if ctx.is_valid:
            trace_id = format(ctx.trace_id, "032x")
            span_id = format(ctx.span_id, "016x")

        log_entry = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
                         + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "service": self._service,
            "correlation_id": correlation_id_var.get(""),
            "trace_id": trace_id,
            "span_id": span_id,
            "message": record.getMessage(),
        }

        # Merge any extra fields added via extra={} in log calls
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", service_name: str = SERVICE_NAME) -> None:
    """Configure root logger to emit structured JSON."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(service_name))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Per-request httpx logs duplicate our access log
    logging.getLogger("httpx").setLevel(logging.WARNING)
