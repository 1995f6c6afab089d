"""Handler that emits Prometheus metrics, spans and structured access logs."""
from __future__ import annotations

import logging
import time
import uuid

import httpx
from opentelemetry.trace import SpanKind, Status, StatusCode

from simple_hcf.observability.logging import correlation_id_var
from simple_hcf.observability.metrics import (
    CLIENT_ERRORS_TOTAL,
    CLIENT_REQUEST_DURATION,
    CLIENT_REQUESTS_TOTAL,
)
from simple_hcf.observability.tracing import get_tracer
from simple_hcf.pipeline import Send

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class ObservabilityHandler:
    """Emit metrics + span + access log per attempt.

    The correlation id is taken from the request, then the current context,
    and generated otherwise; it is written back to the request so retries of
    the same request share it.
    """

    def __init__(self, service_name: str) -> None:
        self._service = service_name
        self._tracer = get_tracer(__name__)

    async def __call__(self, request: httpx.Request, next_send: Send) -> httpx.Response:
        correlation_id = (
            request.headers.get(CORRELATION_HEADER)
            or correlation_id_var.get("")
            or str(uuid.uuid4())
        )
        request.headers[CORRELATION_HEADER] = correlation_id
        token = correlation_id_var.set(correlation_id)

        host = request.url.host
        start = time.perf_counter()
        status_code = 0
        try:
            with self._tracer.start_as_current_span(
                f"HTTP {request.method}", kind=SpanKind.CLIENT
            ) as span:
                span.set_attribute("http.request.method", request.method)
                span.set_attribute("url.full", str(request.url))
                try:
                    response = await next_send(request)
                except Exception as exc:
                    CLIENT_ERRORS_TOTAL.labels(
                        service=self._service,
                        method=request.method,
                        host=host,
                        error_type=type(exc).__name__,
                    ).inc()
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise
                status_code = response.status_code
                span.set_attribute("http.response.status_code", status_code)
                if status_code >= 500:
                    span.set_status(Status(StatusCode.ERROR))
                CLIENT_REQUESTS_TOTAL.labels(
                    service=self._service,
                    method=request.method,
                    host=host,
                    status=str(status_code),
                ).inc()
                return response
        finally:
            elapsed = time.perf_counter() - start
            CLIENT_REQUEST_DURATION.labels(
                service=self._service,
                method=request.method,
                host=host,
            ).observe(elapsed)
            logger.info(
                "request",
                extra={
                    "method": request.method,
                    "url": str(request.url),
                    "status": status_code,
                    "duration_ms": round(elapsed * 1000, 2),
                    "correlation_id": correlation_id,
                },
            )
            correlation_id_var.reset(token)
