"""Data models for the dispatch pipeline."""

from api_dispatch.models.enums import AttemptOutcome, ErrorKind, ExecutionContext, HttpMethod
from api_dispatch.models.request_models import (
    CacheExtension,
    FormData,
    QueryValue,
    RequestSpec,
    RetryPolicy,
)

__all__ = [
    "AttemptOutcome",
    "ErrorKind",
    "ExecutionContext",
    "HttpMethod",
    "CacheExtension",
    "FormData",
    "QueryValue",
    "RequestSpec",
    "RetryPolicy",
]
