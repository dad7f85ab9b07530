"""
Public call surface.

ApiClient wraps the request orchestrator with verb-named helpers and the
bearer-token setter. Most applications use the shared per-process instance
from get_api_client(); code that needs a different origin or transport
builds its own ApiClient.

Usage:
    >>> from api_dispatch import get_api_client
    >>> api = get_api_client()
    >>> rooms = await api.get("/rooms", {"page": 1}, retry={"attempts": 3})
    >>> await api.post("/rooms", {"name": "Lobby"})
"""

from functools import lru_cache
from typing import Any, Mapping, Optional

import httpx
import structlog

from api_dispatch.config import Settings, get_settings
from api_dispatch.dispatch.origin import resolve_base_origin
from api_dispatch.dispatch.orchestrator import ClientState, RequestOrchestrator
from api_dispatch.logging_config import configure_logging
from api_dispatch.models.enums import ExecutionContext, HttpMethod
from api_dispatch.models.request_models import QueryValue, RequestSpec, RetryPolicy
from api_dispatch.transport.base_transport import BaseTransport
from api_dispatch.transport.httpx_transport import HttpxTransport

logger = structlog.get_logger(__name__)


class ApiClient:
    """
    HTTP client with origin resolution, timeouts and retries.

    The base origin is resolved once, here, from the settings and the
    execution context in force at construction time.

    Per-call options accepted by every verb helper:
        headers: Header overrides (take precedence over defaults and the token)
        cancel_token: CancellationToken
        timeout_ms: Deadline per attempt; None or 0 disables it
        cache: Transport cache hint
        cache_extension: CacheExtension or dict (revalidate / tags)
        retry: RetryPolicy or dict (attempts / backoff_ms / retry_on)
        query: Query parameters (non-GET helpers)
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[BaseTransport] = None,
        context: Optional[ExecutionContext] = None,
        page_origin: Optional[str] = None,
        default_headers: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Application settings (origins, defaults, transport limits)
            transport: Transport to use (default: HttpxTransport)
            context: Execution context override (default: settings.EXECUTION_CONTEXT)
            page_origin: Page origin override for browser context
            default_headers: Headers sent with every call (default: JSON content type)
        """
        self.settings = settings
        self.context = context or settings.EXECUTION_CONTEXT
        self.page_origin = page_origin or settings.PAGE_ORIGIN

        if transport is None:
            transport = HttpxTransport(
                connection_limits=httpx.Limits(
                    max_keepalive_connections=settings.TRANSPORT_MAX_KEEPALIVE,
                    max_connections=settings.TRANSPORT_MAX_CONNECTIONS,
                    keepalive_expiry=30.0,
                ),
                follow_redirects=settings.TRANSPORT_FOLLOW_REDIRECTS,
            )
        self.transport = transport

        self.state = ClientState(
            resolve_base_origin(self.context, settings.API_BASE_URL, settings.PUBLIC_API_BASE_URL),
            default_headers,
        )
        self.default_timeout_ms = settings.DEFAULT_TIMEOUT_MS
        self.default_retry = RetryPolicy(
            attempts=settings.RETRY_ATTEMPTS,
            backoff_ms=settings.RETRY_BACKOFF_MS,
            retry_on=frozenset(settings.RETRY_ON_STATUSES),
        )
        self._orchestrator = RequestOrchestrator(
            self.state,
            self.transport,
            context=self.context,
            page_origin=self.page_origin,
            debug=settings.debug,
            metrics_enabled=settings.PROMETHEUS_ENABLED,
        )

        logger.info(
            "Initialized API client",
            base_url=self.state.base_origin or "same-origin",
            context=self.context.value,
            transport_class=self.transport.__class__.__name__,
        )

    @property
    def base_origin(self) -> str:
        return self.state.base_origin

    def set_auth(self, token: Optional[str]) -> None:
        """
        Set or clear the shared bearer token.

        Server code serving several users should pass Authorization per call
        instead: the token is shared by every call made through this client.
        """
        self.state.auth_token = token
        logger.info("Auth token updated", token="[REDACTED]" if token else "cleared")

    async def request(self, spec: RequestSpec) -> Any:
        """Run a fully-specified call. See RequestOrchestrator.execute for errors."""
        return await self._orchestrator.execute(spec)

    async def _call(self, method: HttpMethod, path: str, **options: Any) -> Any:
        options.setdefault("timeout_ms", self.default_timeout_ms)
        if options.get("retry") is None:
            options["retry"] = self.default_retry
        spec = RequestSpec(path=path, method=method, **options)
        return await self.request(spec)

    async def get(
        self,
        path: str,
        query: Optional[Mapping[str, QueryValue]] = None,
        **options: Any,
    ) -> Any:
        """GET `path`. GET never carries a body."""
        return await self._call(HttpMethod.GET, path, query=query, **options)

    async def post(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self._call(HttpMethod.POST, path, body=body, **options)

    async def put(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self._call(HttpMethod.PUT, path, body=body, **options)

    async def patch(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self._call(HttpMethod.PATCH, path, body=body, **options)

    async def delete(self, path: str, **options: Any) -> Any:
        return await self._call(HttpMethod.DELETE, path, **options)

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.state.base_origin or 'same-origin'}, "
            f"context={self.context.value})"
        )


@lru_cache()
def get_api_client() -> ApiClient:
    """
    Get the shared per-process client.

    Built on first use from get_settings(), which also configures logging;
    later changes to the environment do not affect it. Tests reset it with
    get_api_client.cache_clear().
    """
    settings = get_settings()
    configure_logging(log_level=settings.LOG_LEVEL, environment=settings.ENVIRONMENT)
    return ApiClient(settings)
