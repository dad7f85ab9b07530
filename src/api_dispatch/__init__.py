"""
API dispatch client.

One async call surface for talking to an HTTP backend from server-side or
browser-like code:
- Base origin resolution per execution context, with same-origin fallback
- URL, header and body construction
- Per-attempt timeouts and retry with exponential backoff
- Uniform success decoding and typed HTTP errors

Architecture: ApiClient -> RequestOrchestrator -> (URL builder, body encoder,
timeout guard, response classifier, retry controller) -> httpx transport
"""

from api_dispatch.client import ApiClient, get_api_client
from api_dispatch.dispatch.cancellation import CancellationToken
from api_dispatch.dispatch.exceptions import (
    CancellationError,
    ConfigurationWarning,
    DispatchError,
    HttpOutcomeError,
    RequestTimeoutError,
    TransportError,
    UrlConstructionError,
)
from api_dispatch.models.enums import ExecutionContext, HttpMethod
from api_dispatch.models.request_models import CacheExtension, FormData, RequestSpec, RetryPolicy

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "get_api_client",
    "CancellationToken",
    "CancellationError",
    "ConfigurationWarning",
    "DispatchError",
    "HttpOutcomeError",
    "RequestTimeoutError",
    "TransportError",
    "UrlConstructionError",
    "ExecutionContext",
    "HttpMethod",
    "CacheExtension",
    "FormData",
    "RequestSpec",
    "RetryPolicy",
]
