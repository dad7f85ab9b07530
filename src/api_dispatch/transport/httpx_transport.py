"""
httpx transport implementation.

Sends requests through a persistent httpx.AsyncClient. Supports:
- Connection pooling via a lazily created AsyncClient
- Cancellation tokens (the in-flight request is cancelled when the token fires)
- Multipart forms (always multipart, even without files), bytes and text bodies
"""

from typing import Any, Optional

import httpx
import structlog

from api_dispatch.dispatch.cancellation import race_cancellation
from api_dispatch.dispatch.exceptions import TransportError
from api_dispatch.models.request_models import FormData
from api_dispatch.transport.base_transport import BaseTransport, TransportOptions

logger = structlog.get_logger(__name__)


class HttpxTransport(BaseTransport):
    """
    Transport backed by httpx.AsyncClient.

    The client's own timeout is disabled by default: deadlines are enforced
    per attempt by the dispatch timeout guard. Cache hints are not acted on;
    httpx has no response cache.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        connection_limits: Optional[httpx.Limits] = None,
        follow_redirects: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize httpx transport.

        Args:
            timeout: httpx-level timeout in seconds (None disables it)
            connection_limits: httpx connection pool limits (default: 10 max connections)
            follow_redirects: Whether redirects are followed
            transport: Optional low-level httpx transport (e.g. httpx.MockTransport)
        """
        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0,
            )

        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                follow_redirects=self.follow_redirects,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    @staticmethod
    def _multipart_parts(form: FormData) -> list[tuple[str, Any]]:
        # Fields become filename-less parts so httpx always encodes multipart
        parts: list[tuple[str, Any]] = []
        for name, value in form.fields.items():
            if not isinstance(value, (str, bytes)):
                value = str(value)
            parts.append((name, (None, value)))
        parts.extend(form.files.items())
        return parts

    @classmethod
    def _body_arguments(cls, content: Any) -> dict[str, Any]:
        """Map an encoded body (None, str, bytes or FormData) onto httpx arguments."""
        if content is None:
            return {}
        if isinstance(content, FormData):
            return {"files": cls._multipart_parts(content)}
        return {"content": content}

    async def send(self, url: str, options: TransportOptions) -> httpx.Response:
        client = await self._get_client()
        request = client.build_request(
            options.method.value,
            url,
            headers=options.headers,
            **self._body_arguments(options.content),
        )

        try:
            return await race_cancellation(client.send(request), options.cancel_token)
        except httpx.HTTPError as e:
            logger.warning(
                "Transport error",
                method=options.method.value,
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(
                f"Network error: {e}",
                details={"url": url, "error_type": type(e).__name__},
            ) from e

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed httpx transport connection")
