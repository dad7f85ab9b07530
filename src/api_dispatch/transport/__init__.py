"""
Transport abstraction and implementations.

Components:
- BaseTransport: Abstract base class for transports
- HttpxTransport: Implementation over httpx.AsyncClient
- TransportOptions: Per-attempt transport arguments
"""

from api_dispatch.transport.base_transport import BaseTransport, TransportOptions
from api_dispatch.transport.httpx_transport import HttpxTransport

__all__ = [
    "BaseTransport",
    "HttpxTransport",
    "TransportOptions",
]
