"""
Unit tests for base origin resolution.
"""

import warnings

import pytest

from api_dispatch.dispatch.exceptions import ConfigurationWarning
from api_dispatch.dispatch.origin import resolve_base_origin
from api_dispatch.models.enums import ExecutionContext


def test_server_context_prefers_server_base():
    """Test server code uses the server-only value even when both are set."""
    origin = resolve_base_origin(
        ExecutionContext.SERVER, "https://internal.example.com", "https://public.example.com"
    )
    assert origin == "https://internal.example.com"


def test_browser_context_prefers_public_base():
    """Test browser code never sees the server-only value."""
    origin = resolve_base_origin(
        ExecutionContext.BROWSER, "https://internal.example.com", "https://public.example.com"
    )
    assert origin == "https://public.example.com"


@pytest.mark.parametrize("context", list(ExecutionContext))
def test_nothing_configured_means_same_origin(context):
    """Test missing values resolve to the empty string."""
    assert resolve_base_origin(context, None, None) == ""


def test_browser_does_not_fall_back_to_server_base():
    """Test a browser with only the server value configured stays same-origin."""
    assert resolve_base_origin(ExecutionContext.BROWSER, "https://internal.example.com", None) == ""


def test_trailing_slashes_stripped():
    """Test trailing separators are removed so joins never double them."""
    origin = resolve_base_origin(ExecutionContext.SERVER, "https://api.example.com///", None)
    assert origin == "https://api.example.com"


def test_whitespace_only_value_counts_as_absent():
    """Test a blank environment value is treated as unset."""
    assert resolve_base_origin(ExecutionContext.SERVER, "   ", None) == ""


def test_malformed_value_warns_but_is_returned():
    """Test a non-absolute value is a configuration warning, not an error."""
    with pytest.warns(ConfigurationWarning, match="API_BASE_URL"):
        origin = resolve_base_origin(ExecutionContext.SERVER, "api.example.com/", None)

    assert origin == "api.example.com"


def test_well_formed_value_does_not_warn():
    """Test http and https origins resolve silently."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert resolve_base_origin(ExecutionContext.SERVER, "http://api:8080", None) == "http://api:8080"
