"""simple_hcf: an HTTP client factory composing handlers and resilience policies."""

from .builder import PipelineBuilder
from .client import PipelineClient
from .config import ClientSettings
from .exceptions import (
    PipelineError,
    PipelineConfigurationError,
    TimeoutRejectedError,
    BrokenCircuitError,
    BulkheadRejectedError,
)
from .pipeline import MessageHandler, Policy, Send, build_pipeline, compose_handlers, compose_policies

__all__ = [
    "PipelineBuilder",
    "PipelineClient",
    "ClientSettings",
    "PipelineError",
    "PipelineConfigurationError",
    "TimeoutRejectedError",
    "BrokenCircuitError",
    "BulkheadRejectedError",
    "MessageHandler",
    "Policy",
    "Send",
    "build_pipeline",
    "compose_handlers",
    "compose_policies",
]
