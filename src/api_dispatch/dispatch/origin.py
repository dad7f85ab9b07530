"""Base origin resolution."""

import re
import warnings
from typing import Optional

import structlog

from api_dispatch.dispatch.exceptions import ConfigurationWarning
from api_dispatch.models.enums import ExecutionContext

logger = structlog.get_logger(__name__)

_ABSOLUTE_URL = re.compile(r"^https?://")


def resolve_base_origin(
    context: ExecutionContext,
    server_base: Optional[str],
    public_base: Optional[str],
) -> str:
    """
    Pick the base origin for the given execution context.

    Server code prefers the server-only value, browser code the public one.
    Returns "" when nothing is configured, meaning same-origin. Trailing
    slashes are stripped so joining with a path never doubles the separator.

    A value that is not an absolute http(s) URL is reported through a
    ConfigurationWarning and returned unchanged; the failure surfaces later
    when the URL is built.
    """
    if context is ExecutionContext.SERVER:
        chosen, source = server_base, "API_BASE_URL"
    else:
        chosen, source = public_base, "PUBLIC_API_BASE_URL"

    cleaned = (chosen or "").strip().rstrip("/")

    if cleaned and not _ABSOLUTE_URL.match(cleaned):
        message = (
            f"Invalid base URL format in {source}: {cleaned!r}. "
            "Expected format: https://api.example.com"
        )
        logger.warning(message, setting=source, value=cleaned, context=context.value)
        warnings.warn(message, ConfigurationWarning, stacklevel=2)

    return cleaned
