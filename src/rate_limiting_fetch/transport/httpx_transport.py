"""
Default transport backed by httpx.

Uses a persistent httpx.AsyncClient for connection pooling. Performs
exactly one exchange per call and never retries internally.
"""

from typing import Optional

import httpx
import structlog

from rate_limiting_fetch.models.request import FetchRequest
from rate_limiting_fetch.transport.base import BaseTransport
from rate_limiting_fetch.transport.exceptions import (
    TransportConnectionError,
    TransportTimeoutError,
)


logger = structlog.get_logger(__name__)


class HttpxTransport(BaseTransport):
    """
    Transport using httpx for async HTTP communication.
    
    Features:
    - Connection pooling via a lazily created, persistent AsyncClient
    - Pluggable low-level transport (e.g. httpx.MockTransport in tests)
    - httpx network errors mapped to TransportError subclasses
    """
    
    def __init__(
        self,
        timeout: float = 30.0,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize httpx transport.
        
        Args:
            timeout: Default per-exchange timeout in seconds
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Low-level httpx transport override
        """
        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )
        
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport
    
    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                follow_redirects=True
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client
    
    async def fetch(self, request: FetchRequest) -> httpx.Response:
        client = await self._get_client()
        http_request = request.to_httpx_request(client)
        
        try:
            response = await client.send(http_request)
        except httpx.TimeoutException as e:
            logger.warning(
                "HTTP request timeout",
                method=http_request.method,
                url=str(http_request.url),
                error=str(e)
            )
            raise TransportTimeoutError(
                f"Request timeout: {http_request.method} {http_request.url}",
                details={"url": str(http_request.url), "error_type": type(e).__name__}
            ) from e
        except httpx.TransportError as e:
            logger.warning(
                "HTTP network error",
                method=http_request.method,
                url=str(http_request.url),
                error=str(e)
            )
            raise TransportConnectionError(
                f"Network error: {str(e)}",
                details={"url": str(http_request.url), "error_type": type(e).__name__}
            ) from e
        
        logger.debug(
            "HTTP exchange complete",
            method=http_request.method,
            url=str(http_request.url),
            status_code=response.status_code
        )
        return response
    
    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed httpx AsyncClient")
        self._client = None
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout}s)"
