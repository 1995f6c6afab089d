"""Prometheus metrics definitions shared across the pipeline.

All metrics are created here so import order doesn't matter.  Handlers and
policies import the metrics they need; unused ones stay at zero.
"""
from prometheus_client import Counter, Gauge, Histogram

# ── Outgoing requests ───────────────────────────────────────────────────────
CLIENT_REQUESTS_TOTAL = Counter(
    "hcf_client_requests_total",
    "Outgoing HTTP requests sent through the pipeline",
    ["service", "method", "host", "status"],
)

CLIENT_ERRORS_TOTAL = Counter(
    "hcf_client_errors_total",
    "Outgoing HTTP requests that raised instead of returning a response",
    ["service", "method", "host", "error_type"],
)

CLIENT_REQUEST_DURATION = Histogram(
    "hcf_client_request_duration_seconds",
    "Outgoing HTTP request duration per attempt",
    ["service", "method", "host"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30],
)

# ── Resilience policies ───────────────────────────────────────────────────────
RETRY_ATTEMPTS = Counter(
    "hcf_retry_attempts_total",
    "Number of retry attempts",
    ["operation", "reason"],
)

POLICY_TIMEOUTS = Counter(
    "hcf_policy_timeouts_total",
    "Attempts cancelled by the timeout policy",
    ["operation"],
)

BREAKER_STATE = Gauge(
    "hcf_breaker_state",
    "Circuit breaker state: 0=closed 1=open 2=half_open",
    ["downstream"],
)

BREAKER_OPEN_TOTAL = Counter(
    "hcf_breaker_open_total",
    "Number of times the circuit breaker tripped to OPEN",
    ["downstream"],
)

BULKHEAD_REJECTIONS = Counter(
    "hcf_bulkhead_rejections_total",
    "Requests rejected by bulkhead semaphore",
    ["downstream"],
)
