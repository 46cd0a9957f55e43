"""
Transport abstraction and implementations.

Components:
- BaseTransport: Abstract base class for single-exchange transports
- HttpxTransport: Default implementation backed by httpx.AsyncClient
- MockingTransport: Fabricates 429/500/503 responses via a MockFetchController
- exceptions: Transport-level (network) exceptions
"""

from rate_limiting_fetch.transport.base import BaseTransport
from rate_limiting_fetch.transport.httpx_transport import HttpxTransport
from rate_limiting_fetch.transport.mock import (
    MockFetchController,
    MockFetchInfo,
    MockingTransport,
    RandomMockFetchController,
    SimpleMockFetchController,
    add_no_response_headers,
    add_retry_after_response_header,
)
from rate_limiting_fetch.transport.exceptions import (
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
)

__all__ = [
    "BaseTransport",
    "HttpxTransport",
    "MockingTransport",
    "MockFetchInfo",
    "MockFetchController",
    "SimpleMockFetchController",
    "RandomMockFetchController",
    "add_no_response_headers",
    "add_retry_after_response_header",
    "TransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
]
