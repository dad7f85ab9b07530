"""
Enumerations for API dispatch data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP verbs accepted by the dispatch client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class ExecutionContext(str, Enum):
    """
    Where the calling code runs.

    SERVER code has no page of its own, so same-origin requests fall back to a
    local placeholder origin. BROWSER code targets the origin of the page it
    was served from.
    """

    SERVER = "server"
    BROWSER = "browser"


class ErrorKind(str, Enum):
    """
    Discriminant carried by every dispatch error.

    Classification checks this value rather than the exception class, so errors
    raised by code that bundles its own copy of the taxonomy still classify.
    """

    HTTP_OUTCOME = "http_outcome"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    INVALID_URL = "invalid_url"


class AttemptOutcome(str, Enum):
    """Result of a single transport attempt."""

    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
