"""OpenTelemetry tracing setup.

Configures an OTLP gRPC exporter (Jaeger/Tempo/Collector compatible) when
OTEL_EXPORTER_OTLP_ENDPOINT is set.  Without it spans are still created, so
trace ids show up in logs, but nothing is exported.
"""
from __future__ import annotations

import logging
import os

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)


def setup_tracing(service_name: str) -> TracerProvider:
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if endpoint:
        # Optional extra: pip install simple-hcf[otlp]
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("otel_tracing_configured", extra={"endpoint": endpoint})

    trace.set_tracer_provider(provider)
    return provider


def get_tracer(name: str = "simple_hcf") -> trace.Tracer:
    return trace.get_tracer(name)
