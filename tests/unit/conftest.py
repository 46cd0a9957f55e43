"""Unit test fixtures (mocks and stubs).

Provides mock transports and canned responses for testing without network access.
"""

from typing import Dict, Optional
from unittest.mock import AsyncMock

import httpx
import pytest

from rate_limiting_fetch.transport.base import BaseTransport

TEST_URL = "https://api.example.test/items/42"


@pytest.fixture
def make_response():
    """Factory fixture to create httpx.Response objects.
    
    Usage:
        def test_something(make_response):
            response = make_response(429, {"Retry-After": "5"})
    """
    def _create(
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        url: str = TEST_URL,
    ) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers=headers or {},
            request=httpx.Request("GET", url),
        )
    
    return _create


@pytest.fixture
def mock_transport():
    """Mock BaseTransport; set `fetch.side_effect` / `fetch.return_value` per test."""
    mock = AsyncMock(spec=BaseTransport)
    mock.fetch = AsyncMock()
    mock.close = AsyncMock()
    return mock
