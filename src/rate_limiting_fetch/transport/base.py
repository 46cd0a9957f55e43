"""
Abstract base transport.

Defines the interface that all transports (httpx, mocking, etc.) must
adhere to. A transport performs exactly one HTTP exchange; the retry
policy lives entirely in RateLimitingFetch, which lets transports be
swapped (e.g. for test doubles) without touching it.
"""

from abc import ABC, abstractmethod

import httpx
import structlog

from rate_limiting_fetch.models.request import FetchRequest


logger = structlog.get_logger(__name__)


class BaseTransport(ABC):
    """
    Abstract base class for single-exchange HTTP transports.
    
    Responsibilities:
    - Send one request and return the response, whatever its status code
    - Translate network failures into TransportError subclasses
    
    Does NOT handle:
    - Retries of any kind (that's RateLimitingFetch's job)
    - Raising for 4xx/5xx statuses
    """
    
    @abstractmethod
    async def fetch(self, request: FetchRequest) -> httpx.Response:
        """
        Perform a single HTTP exchange.
        
        Args:
            request: Request descriptor, identical on every attempt
            
        Returns:
            The response received, regardless of status code
            
        Raises:
            TransportConnectionError: Network failure, no response received
            TransportTimeoutError: Exchange exceeded its timeout
        """
        pass
    
    async def close(self) -> None:
        """
        Close connections and cleanup resources.
        
        Default implementation does nothing. Subclasses should override
        if they hold persistent connections.
        """
        logger.debug("Closing transport", transport_class=self.__class__.__name__)
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
