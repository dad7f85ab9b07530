"""
Abstract transport for the dispatch pipeline.

Defines the interface every transport (httpx, test doubles, framework
adapters) must implement. The orchestrator only ever talks to this
interface, so the network layer can be swapped without touching retry,
timeout or classification logic.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from api_dispatch.models.enums import HttpMethod
from api_dispatch.models.request_models import CacheExtension

logger = structlog.get_logger(__name__)


class TransportOptions(BaseModel):
    """
    Per-attempt transport arguments.

    Built once per call and reused unchanged by every attempt.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HttpMethod = Field(default=HttpMethod.GET)
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    content: Any = Field(default=None, description="Encoded body; None means no body")
    cancel_token: Any = Field(default=None, description="Optional CancellationToken")
    cache: Optional[str] = Field(default=None, description="Opaque cache hint")
    cache_extension: Optional[CacheExtension] = Field(default=None)


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    Responsibilities:
    - Send one request and return the raw response
    - Honour the cancellation token promptly
    - Report network-level failures as TransportError

    Does NOT handle:
    - Status classification (that's the classifier's job)
    - Retries or deadlines (that's the orchestrator's job)
    """

    @abstractmethod
    async def send(self, url: str, options: TransportOptions) -> httpx.Response:
        """
        Send a request and return the response, whatever its status.

        Args:
            url: Fully-qualified URL
            options: Method, headers, body and call-level hints

        Returns:
            httpx.Response with the body already read

        Raises:
            TransportError: No response could be obtained
            CancellationError: The cancellation token fired
        """
        pass

    async def close(self):
        """
        Close transport connections and cleanup resources.

        Default implementation does nothing.
        """
        logger.debug("Closing transport", transport_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
