"""
Error taxonomy for the dispatch layer.

Every error carries a `kind` discriminant (ErrorKind). The retry controller
classifies failures by that value rather than by class identity, so an error
raised from another copy of this module still classifies correctly.

Hierarchy:
    DispatchError
    ├── HttpOutcomeError       non-2xx response (never double-wrapped)
    ├── TransportError         no response was obtained (retryable)
    │   └── RequestTimeoutError  client-side deadline expired (retryable)
    ├── CancellationError      caller cancelled (never retried)
    └── UrlConstructionError   target URL could not be built

ConfigurationWarning is a warning category, never raised.
"""

import asyncio
from typing import Any

from api_dispatch.models.enums import ErrorKind


class ConfigurationWarning(UserWarning):
    """Emitted when a configured base origin does not look like an absolute URL."""


class DispatchError(Exception):
    """
    Base exception for all dispatch errors.

    All dispatch-specific exceptions inherit from this to allow catching
    any client-related error with a single except clause.
    """
    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        # Attached by the orchestrator when the call terminates
        self.retry_metadata = None


class HttpOutcomeError(DispatchError):
    """
    Raised when the backend answers with a non-2xx status.

    Attributes:
        status: HTTP status code
        data: Best-effort decoded response payload (None if absent or undecodable)
    """
    kind = ErrorKind.HTTP_OUTCOME

    def __init__(self, message: str, status: int, data: Any = None):
        super().__init__(message, details={"status": status})
        self.status = status
        self.data = data

    def __repr__(self) -> str:
        return f"HttpOutcomeError(status={self.status}, message={self.message!r})"


class TransportError(DispatchError):
    """
    Raised when no response was obtained (DNS, connect, reset, protocol errors).

    The underlying exception is chained as __cause__.
    """
    kind = ErrorKind.TRANSPORT


class RequestTimeoutError(TransportError):
    """Raised by the timeout guard when an attempt outlives its deadline."""
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int):
        super().__init__(
            f"Request timed out after {timeout_ms}ms",
            details={"timeout_ms": timeout_ms},
        )
        self.timeout_ms = timeout_ms


class CancellationError(DispatchError):
    """Raised when the caller cancelled the request through a CancellationToken."""
    kind = ErrorKind.CANCELLED


class UrlConstructionError(DispatchError):
    """Raised when base origin and path do not combine into an absolute URL."""
    kind = ErrorKind.INVALID_URL


def error_kind(error: BaseException) -> ErrorKind | None:
    """Read the discriminant of an error, tolerating plain string values."""
    kind = getattr(error, "kind", None)
    if kind is None:
        return None
    try:
        return ErrorKind(kind)
    except ValueError:
        return None


def is_http_outcome_error(error: BaseException) -> bool:
    """True for an already-classified HTTP error, including foreign copies of it."""
    return error_kind(error) is ErrorKind.HTTP_OUTCOME and isinstance(
        getattr(error, "status", None), int
    )


def is_cancellation_error(error: BaseException) -> bool:
    """True for caller-initiated cancellation in any of its forms."""
    return isinstance(error, asyncio.CancelledError) or error_kind(error) is ErrorKind.CANCELLED
