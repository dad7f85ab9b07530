"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without network access.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from api_dispatch.dispatch.orchestrator import ClientState, RequestOrchestrator
from api_dispatch.transport.base_transport import BaseTransport


@pytest.fixture
def mock_transport():
    """Mock transport; set `send.side_effect` or `send.return_value` per test."""
    return AsyncMock(spec=BaseTransport)


@pytest.fixture
def hanging_send():
    """Coroutine function that never completes, simulating a hung request."""

    async def _hang(url, options):
        await asyncio.Event().wait()

    return _hang


@pytest.fixture
def client_state() -> ClientState:
    """Same-origin client state with the default JSON content type."""
    return ClientState(base_origin="")


@pytest.fixture
def orchestrator(client_state, mock_transport) -> RequestOrchestrator:
    """Orchestrator over the mock transport, server context, metrics disabled."""
    return RequestOrchestrator(client_state, mock_transport, metrics_enabled=False)
