"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
from typing import Any, Callable

import httpx
import pytest

from api_dispatch.client import get_api_client
from api_dispatch.config import Settings
from api_dispatch.models.enums import ExecutionContext

ENV_VARS = (
    "API_BASE_URL",
    "PUBLIC_API_BASE_URL",
    "EXECUTION_CONTEXT",
    "PAGE_ORIGIN",
    "ENVIRONMENT",
    "RETRY_ATTEMPTS",
    "RETRY_BACKOFF_MS",
    "DEFAULT_TIMEOUT_MS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep base URLs and the shared client from leaking between tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_api_client.cache_clear()
    yield
    get_api_client.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Same-origin, server context, no retries, metrics disabled. Override
    specific settings in individual tests with model_copy(update=...).
    """
    return Settings(
        _env_file=None,
        APP_NAME="API Dispatch Client (Test)",
        ENVIRONMENT="development",
        LOG_LEVEL="DEBUG",
        API_BASE_URL=None,
        PUBLIC_API_BASE_URL=None,
        EXECUTION_CONTEXT=ExecutionContext.SERVER,
        PAGE_ORIGIN="https://app.example.com",
        DEFAULT_TIMEOUT_MS=15000,
        RETRY_ATTEMPTS=1,
        RETRY_BACKOFF_MS=300,
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Factory fixture building canned httpx responses.

    If the content type mentions json, the body is JSON-encoded.

    Usage:
        def test_something(make_response):
            response = make_response(500, "Internal fail", "text/plain")
    """

    def _make(
        status: int,
        body: Any = None,
        content_type: str = "application/json",
    ) -> httpx.Response:
        if "json" in content_type:
            content = json.dumps(body).encode("utf-8")
        elif isinstance(body, str):
            content = body.encode("utf-8")
        else:
            content = body or b""
        return httpx.Response(status, content=content, headers={"content-type": content_type})

    return _make
