"""Monitoring and metrics for the API dispatch client."""

from api_dispatch.monitoring.metrics import (
    dispatch_attempts_total,
    dispatch_request_latency_seconds,
    dispatch_requests_total,
    dispatch_retries_total,
)

__all__ = [
    "dispatch_attempts_total",
    "dispatch_request_latency_seconds",
    "dispatch_requests_total",
    "dispatch_retries_total",
]
