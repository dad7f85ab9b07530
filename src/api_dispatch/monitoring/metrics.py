"""Prometheus metrics for the API dispatch client.

The host application exposes these through its own /metrics endpoint.
Alert rules worth configuring:
- dispatch_requests_total{outcome!="success"} (backend error rate)
- dispatch_retries_total (rising retries indicate an unstable backend)
- dispatch_request_latency_seconds (slow backend or aggressive backoff)
"""

from prometheus_client import Counter, Histogram

# === Request Metrics ===

dispatch_requests_total = Counter(
    "dispatch_requests_total",
    "Total dispatched calls by method and final outcome",
    ["method", "outcome"],
)
"""
Calls counter by HTTP method and final outcome.

Labels:
- method: GET, POST, PUT, PATCH, DELETE
- outcome: success, http_error, transport_error, timeout, cancelled
"""

dispatch_attempts_total = Counter(
    "dispatch_attempts_total",
    "Total transport attempts by method and attempt result",
    ["method", "result"],
)

# === Retry Metrics ===

dispatch_retries_total = Counter(
    "dispatch_retries_total",
    "Total retries scheduled by triggering failure",
    ["reason"],
)
"""
Retries counter.

Labels:
- reason: http_<status> for retryable statuses, transport_error, timeout
"""

# === Latency Metrics ===

dispatch_request_latency_seconds = Histogram(
    "dispatch_request_latency_seconds",
    "End-to-end call latency in seconds, retries and backoff included",
    ["method", "outcome"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 15.0, 30.0, 60.0],
)
