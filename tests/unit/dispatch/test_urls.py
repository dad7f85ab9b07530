"""
Unit tests for URL construction.
"""

import httpx
import pytest

from api_dispatch.dispatch.exceptions import UrlConstructionError
from api_dispatch.dispatch.urls import build_url, normalize_path, stringify_query_value
from api_dispatch.models.enums import ExecutionContext


# ============================================================================
# Origin and Path
# ============================================================================


def test_server_same_origin_uses_localhost_placeholder():
    """Test empty base origin on the server resolves against http://localhost."""
    assert build_url("", "/health", context=ExecutionContext.SERVER) == "http://localhost/health"


def test_browser_same_origin_uses_page_origin():
    """Test empty base origin in the browser targets the page's own origin."""
    url = build_url(
        "",
        "/rooms",
        context=ExecutionContext.BROWSER,
        page_origin="https://app.example.com",
    )
    assert url == "https://app.example.com/rooms"


def test_configured_origin_is_used():
    """Test an explicit base origin wins over any same-origin fallback."""
    url = build_url(
        "https://public.example.com",
        "/ping",
        context=ExecutionContext.BROWSER,
        page_origin="https://app.example.com",
    )
    assert url == "https://public.example.com/ping"


@pytest.mark.parametrize("path", ["rooms", "/rooms"])
def test_path_gets_single_leading_separator(path):
    """Test paths with and without a leading slash build the same URL."""
    assert build_url("https://api.example.com", path) == "https://api.example.com/rooms"


def test_normalize_path():
    """Test normalize_path only prepends when needed."""
    assert normalize_path("a/b") == "/a/b"
    assert normalize_path("/a/b") == "/a/b"


def test_unparseable_origin_raises():
    """Test an origin without scheme and host cannot build a URL."""
    with pytest.raises(UrlConstructionError):
        build_url("api.example.com", "/rooms")


# ============================================================================
# Query String
# ============================================================================


def test_none_query_values_are_omitted():
    """Test keys with absent values never appear in the URL."""
    url = build_url("", "/rooms", {"page": 2, "filter": None, "q": "lobby"})
    params = httpx.URL(url).params

    assert "filter" not in params
    assert params["page"] == "2"
    assert params["q"] == "lobby"


def test_query_values_are_percent_encoded():
    """Test reserved characters are encoded and decode back to the input."""
    url = build_url("", "/search", {"q": "a&b=c/d", "name": "Zoë"})

    assert "a&b=c/d" not in url
    assert httpx.URL(url).params["q"] == "a&b=c/d"
    assert httpx.URL(url).params["name"] == "Zoë"


def test_booleans_and_numbers_are_stringified():
    """Test booleans render lower-case and numbers render as written."""
    params = httpx.URL(build_url("", "/rooms", {"open": True, "vip": False, "limit": 20, "ratio": 0.5})).params

    assert params["open"] == "true"
    assert params["vip"] == "false"
    assert params["limit"] == "20"
    assert params["ratio"] == "0.5"


@pytest.mark.parametrize(
    "value, expected",
    [(1.0, "1"), (-3.0, "-3"), (2.5, "2.5"), (0.1, "0.1"), (float("nan"), "NaN"), (float("inf"), "Infinity")],
)
def test_floats_render_like_web_number_strings(value, expected):
    """Test whole-number floats drop the trailing ".0"."""
    assert stringify_query_value(value) == expected


def test_query_key_already_in_path_is_overwritten():
    """Test the last write for a key wins."""
    url = build_url("", "/rooms?page=1", {"page": 3})
    assert httpx.URL(url).params.get_list("page") == ["3"]


def test_empty_query_leaves_url_untouched():
    """Test no query string is appended for an empty mapping."""
    assert build_url("", "/rooms", {}) == "http://localhost/rooms"
