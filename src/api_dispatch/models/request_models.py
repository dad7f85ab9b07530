"""
Request-side data models for the dispatch pipeline.

RequestSpec describes one call and lives only for the duration of that call.
RetryPolicy and CacheExtension are immutable option blocks attached to it.
FormData is the marker type for multipart payloads.
"""

from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api_dispatch.models.enums import HttpMethod

QueryValue = Union[str, int, float, bool, None]

DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_BACKOFF_MS = 300
DEFAULT_RETRY_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


class RetryPolicy(BaseModel):
    """
    Retry configuration for a single call.

    `attempts` counts every attempt including the first, so 1 means no retries.
    Values below 1 are clamped to 1 rather than rejected.
    """
    model_config = ConfigDict(frozen=True)

    attempts: int = Field(default=1, description="Total number of attempts (1 = no retries)")
    backoff_ms: int = Field(default=DEFAULT_BACKOFF_MS, ge=0, description="Base backoff in ms")
    retry_on: frozenset[int] = Field(
        default=DEFAULT_RETRY_STATUSES,
        description="HTTP status codes that should be retried",
    )

    @field_validator("attempts")
    @classmethod
    def clamp_attempts(cls, value: int) -> int:
        return max(1, value)


class CacheExtension(BaseModel):
    """
    Server-side caching hints handed to the transport untouched.

    Only transports running in a server context act on these.
    """
    model_config = ConfigDict(frozen=True)

    revalidate: Union[int, Literal[False], None] = Field(
        default=None, description="Revalidation window in seconds, or False to disable caching"
    )
    tags: Optional[list[str]] = Field(default=None, description="Cache invalidation tags")


class FormData(BaseModel):
    """
    Multipart form payload.

    `files` values follow httpx conventions: raw bytes, a file object, or a
    (filename, content[, content_type]) tuple.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    fields: dict[str, Any] = Field(default_factory=dict)
    files: dict[str, Any] = Field(default_factory=dict)


class RequestSpec(BaseModel):
    """Everything the orchestrator needs to run one call."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str = Field(..., description="Path relative to the base origin, e.g. '/rooms' or 'rooms'")
    method: HttpMethod = Field(default=HttpMethod.GET)
    query: Optional[Mapping[str, QueryValue]] = Field(default=None)
    body: Any = Field(default=None, description="Opaque payload; None means no body")
    headers: Optional[Mapping[str, str]] = Field(default=None, description="Per-call header overrides")
    cancel_token: Any = Field(default=None, description="Optional CancellationToken")
    timeout_ms: Optional[int] = Field(
        default=DEFAULT_TIMEOUT_MS, description="Hard deadline per attempt; None or 0 disables it"
    )
    cache: Optional[str] = Field(default=None, description="Transport cache hint, e.g. 'no-store'")
    cache_extension: Optional[CacheExtension] = Field(default=None)
    retry: Optional[RetryPolicy] = Field(default=None)
