"""
URL construction.

Joins the resolved base origin with a caller-relative path and appends the
query string. An empty base origin means same-origin: browser code targets
its page origin, server code gets a local placeholder because it has no page.
"""

import math
from typing import Mapping, Optional

import httpx

from api_dispatch.dispatch.exceptions import UrlConstructionError
from api_dispatch.models.enums import ExecutionContext
from api_dispatch.models.request_models import QueryValue

SERVER_PLACEHOLDER_ORIGIN = "http://localhost"


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def stringify_query_value(value: QueryValue) -> str:
    # Lower-case booleans, matching how query strings are written on the web
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def format_float(value: float) -> str:
    # Whole numbers drop the ".0" (1.0 -> "1"); non-finite values use web spelling
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def build_url(
    base_origin: str,
    path: str,
    query: Optional[Mapping[str, QueryValue]] = None,
    *,
    context: ExecutionContext = ExecutionContext.SERVER,
    page_origin: Optional[str] = None,
) -> str:
    """
    Build a fully-qualified URL string.

    Args:
        base_origin: Resolved origin, possibly "" for same-origin
        path: Caller path, with or without a leading "/"
        query: Query parameters; None values are skipped
        context: Execution context, decides the same-origin fallback
        page_origin: Origin of the current page (browser context only)

    Raises:
        UrlConstructionError: If the result is not an absolute URL
    """
    if base_origin:
        origin = base_origin
    elif context is ExecutionContext.SERVER:
        origin = SERVER_PLACEHOLDER_ORIGIN
    else:
        origin = page_origin or SERVER_PLACEHOLDER_ORIGIN

    cleaned_path = normalize_path(path)

    try:
        base = httpx.URL(origin)
        url = base.join(cleaned_path)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise UrlConstructionError(
            f"Invalid URL: {origin!r} + {cleaned_path!r}",
            details={"origin": origin, "path": cleaned_path},
        ) from exc

    if not base.scheme or not base.host:
        raise UrlConstructionError(
            f"Invalid URL: {origin!r} + {cleaned_path!r}",
            details={"origin": origin, "path": cleaned_path},
        )

    if query:
        for key, value in query.items():
            if value is None:
                continue
            url = url.copy_set_param(key, stringify_query_value(value))

    return str(url)
