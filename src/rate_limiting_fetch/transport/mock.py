"""
Mocking transport for exercising retry paths without a misbehaving server.

A MockFetchController decides, per exchange, whether to fabricate a
synthetic failure (429/500/503, optionally with a Retry-After header) or
let the request through to a wrapped transport. Controllers are swappable
at any time, which is how tests steer a RateLimitingFetch into specific
retry scenarios.
"""

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol

import httpx
import structlog

from rate_limiting_fetch.constants import (
    INTERNAL_SERVER_ERROR_STATUS_CODE,
    RETRY_AFTER_HEADER,
    SERVICE_UNAVAILABLE_STATUS_CODE,
    TOO_MANY_REQUESTS_STATUS_CODE,
)
from rate_limiting_fetch.models.request import FetchRequest
from rate_limiting_fetch.transport.base import BaseTransport
from rate_limiting_fetch.transport.httpx_transport import HttpxTransport


logger = structlog.get_logger(__name__)

HeaderPopulator = Callable[[Dict[str, str]], None]


def add_no_response_headers(headers: Dict[str, str]) -> None:
    pass


def add_retry_after_response_header(headers: Dict[str, str]) -> None:
    headers[RETRY_AFTER_HEADER] = "5"


@dataclass(frozen=True)
class MockFetchInfo:
    """
    Description of a synthetic failure response.
    
    Attributes:
        response_status_code: Status code of the fabricated response
        response_status_text: Reason phrase of the fabricated response
        add_response_headers: Populates the fabricated response's headers
    """

    response_status_code: int
    response_status_text: str
    add_response_headers: HeaderPopulator = field(default=add_no_response_headers)


class MockFetchController(Protocol):
    """
    Protocol for deciding whether the next exchange is mocked.
    """

    def get_mock_fetch_info(self, time_of_last_rate_limit: float) -> Optional[MockFetchInfo]:
        """
        Args:
            time_of_last_rate_limit: Epoch millis of the last injected failure (0 if none)
        
        Returns:
            MockFetchInfo to fabricate a failure, or None to pass through
        """
        ...


class SimpleMockFetchController:
    """
    Returns whatever was last set, until it is changed.
    """

    def __init__(self, next_mock_fetch_info: Optional[MockFetchInfo] = None):
        self.next_mock_fetch_info = next_mock_fetch_info

    def set_next_mock_fetch_info(self, next_mock_fetch_info: Optional[MockFetchInfo]) -> None:
        self.next_mock_fetch_info = next_mock_fetch_info

    def get_mock_fetch_info(self, time_of_last_rate_limit: float) -> Optional[MockFetchInfo]:
        return self.next_mock_fetch_info


class RandomMockFetchController:
    """
    Randomly injects 429 Too Many Requests, 500 Internal Server Error and
    503 Service Unavailable responses, mixing in Retry-After headers.
    
    Failures are more likely shortly after the previous injected failure,
    loosely imitating a server that is under pressure.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def get_mock_fetch_info(self, time_of_last_rate_limit: float) -> Optional[MockFetchInfo]:
        now = time.time() * 1000
        millis_since_last_rate_limit = now - time_of_last_rate_limit
        threshold = self._pass_through_threshold(millis_since_last_rate_limit)
        logger.debug(
            "Rate limit randomness threshold",
            threshold=threshold,
            millis_since_last_rate_limit=millis_since_last_rate_limit,
        )
        if self._rng.random() <= threshold:
            return None
        
        random_value = self._rng.random()
        if random_value < 0.5:
            return MockFetchInfo(
                response_status_code=TOO_MANY_REQUESTS_STATUS_CODE,
                response_status_text="Too Many Requests",
                add_response_headers=self._random_header_populator(),
            )
        elif random_value < 0.75:
            return MockFetchInfo(
                response_status_code=INTERNAL_SERVER_ERROR_STATUS_CODE,
                response_status_text="Internal Server Error",
                add_response_headers=add_no_response_headers,
            )
        else:
            return MockFetchInfo(
                response_status_code=SERVICE_UNAVAILABLE_STATUS_CODE,
                response_status_text="Service Unavailable",
                add_response_headers=self._random_header_populator(),
            )

    @staticmethod
    def _pass_through_threshold(millis_since_last_rate_limit: float) -> float:
        if millis_since_last_rate_limit < 100:
            return 0.7
        elif millis_since_last_rate_limit < 1000:
            return 0.75
        elif millis_since_last_rate_limit < 5000:
            return 0.8
        elif millis_since_last_rate_limit < 10000:
            return 0.85
        return 0.9

    def _random_header_populator(self) -> HeaderPopulator:
        if self._rng.random() < 0.5:
            return add_no_response_headers
        return add_retry_after_response_header


class MockingTransport(BaseTransport):
    """
    Transport that fabricates failure responses on demand.
    
    When the controller returns no MockFetchInfo, the request is passed
    to the wrapped transport unchanged.
    """

    def __init__(
        self,
        delegate: Optional[BaseTransport] = None,
        controller: Optional[MockFetchController] = None,
    ):
        self.delegate = delegate if delegate is not None else HttpxTransport()
        self.mock_fetch_controller: MockFetchController = controller or SimpleMockFetchController()
        self.time_of_last_rate_limit: float = 0

    def set_mock_fetch_controller(self, controller: MockFetchController) -> None:
        self.mock_fetch_controller = controller

    async def fetch(self, request: FetchRequest) -> httpx.Response:
        mock_fetch_info = self.mock_fetch_controller.get_mock_fetch_info(self.time_of_last_rate_limit)
        if mock_fetch_info is None:
            return await self.delegate.fetch(request)
        
        self.time_of_last_rate_limit = time.time() * 1000
        headers: Dict[str, str] = {}
        mock_fetch_info.add_response_headers(headers)
        logger.debug(
            "Fabricating mock failure response",
            url=request.url,
            status_code=mock_fetch_info.response_status_code,
            headers=headers,
        )
        return httpx.Response(
            mock_fetch_info.response_status_code,
            headers=headers,
            request=httpx.Request(request.method.upper(), request.url),
            extensions={
                "reason_phrase": mock_fetch_info.response_status_text.encode("ascii", errors="replace")
            },
        )

    async def close(self) -> None:
        await self.delegate.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(delegate={self.delegate!r})"
