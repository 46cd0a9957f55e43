"""
Rate limiting fetch orchestrator.

RateLimitingFetch is a drop-in replacement for a plain "send request, get
response" call. It drives one logical request through a bounded sequence
of attempts:

    ATTEMPTING -> (retryable, budget left) -> WAITING -> ATTEMPTING -> ... -> DONE

Each attempt invokes the transport with the unchanged request, asks the
retry detector whether to retry, and if so waits for the computed delay
without blocking the event loop. The final response is returned as-is,
including a 429/500/503 once the retry budget is exhausted.

Usage:
    async with RateLimitingFetch(NON_UI_CONTEXT_DEFAULTS) as rate_limiting_fetch:
        response = await rate_limiting_fetch.fetch("https://api.example.com/items")
"""

import asyncio
import math
from typing import Any, Dict, Optional

import httpx
import structlog

from rate_limiting_fetch.config import Settings
from rate_limiting_fetch.constants import MIN_JITTER_MULTIPLIER
from rate_limiting_fetch.models.options import RateLimitingOptions
from rate_limiting_fetch.models.request import FetchRequest
from rate_limiting_fetch.monitoring.stats import (
    NoopStatsRecorder,
    PrometheusStatsRecorder,
    StatsRecorder,
)
from rate_limiting_fetch.retry.detector import DefaultRetryDetector, RetryDetector
from rate_limiting_fetch.retry.exceptions import InvalidOptionsError, RetryCancelledError
from rate_limiting_fetch.transport.base import BaseTransport
from rate_limiting_fetch.transport.httpx_transport import HttpxTransport

logger = structlog.get_logger(__name__)


class RateLimitingFetch:
    """
    Fetch implementation that handles rate limiting.
    
    Holds no per-call state: the retry budget and last delay are local to
    each `fetch` call, so concurrent fetches on one instance never interfere
    with each other's bookkeeping. The injected collaborators (transport,
    stats recorder, retry detector) and the debug flag are configuration;
    changes take effect from the next `fetch` call onward.
    
    Attributes:
        options: Validated, immutable retry options
        transport: Transport performing single HTTP exchanges
        stats_recorder: Recorder for attempts and retries
        retry_detector: Decides whether and when to retry
        debug_enabled: Whether to narrate attempts in the logs
    """

    def __init__(
        self,
        options: RateLimitingOptions,
        transport: Optional[BaseTransport] = None,
        stats_recorder: Optional[StatsRecorder] = None,
        retry_detector: Optional[RetryDetector] = None,
        debug_enabled: bool = False,
    ):
        """
        Initialize rate limiting fetch.
        
        Args:
            options: Retry options, validated immediately
            transport: Transport to use (default: HttpxTransport)
            stats_recorder: Stats recorder to use (default: NoopStatsRecorder)
            retry_detector: Retry detector to use (default: DefaultRetryDetector)
            debug_enabled: Narrate attempts and retries in the logs
        
        Raises:
            InvalidOptionsError: If options violate an invariant
        """
        self._validate_options(options)
        self.options = options
        self.transport: BaseTransport = transport or HttpxTransport()
        self.stats_recorder: StatsRecorder = stats_recorder or NoopStatsRecorder()
        self.retry_detector: RetryDetector = retry_detector or DefaultRetryDetector()
        self.debug_enabled = debug_enabled

        logger.info(
            "RateLimitingFetch initialized",
            max_retries=options.max_retries,
            max_retry_delay_millis=options.max_retry_delay_millis,
            backoff_multiplier=options.backoff_multiplier,
            initial_retry_delay_millis=options.initial_retry_delay_millis,
            max_jitter_multiplier=options.max_jitter_multiplier,
            transport=repr(self.transport),
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RateLimitingFetch":
        """
        Build a fully wired instance from application settings.
        
        Args:
            settings: Settings to use (default: freshly loaded from the environment)
        """
        settings = settings or Settings()
        transport = HttpxTransport(
            timeout=settings.HTTP_TIMEOUT,
            connection_limits=httpx.Limits(
                max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
                max_connections=settings.HTTP_MAX_CONNECTIONS,
            ),
        )
        stats_recorder = PrometheusStatsRecorder() if settings.PROMETHEUS_ENABLED else None
        return cls(
            RateLimitingOptions.from_settings(settings),
            transport=transport,
            stats_recorder=stats_recorder,
            debug_enabled=settings.DEBUG,
        )

    def set_transport(self, transport: BaseTransport) -> None:
        """
        Replace the transport, e.g. with a MockingTransport:
        
            if os.environ.get("MOCK_RATE_LIMITING") == "true":
                rate_limiting_fetch.set_transport(
                    MockingTransport(controller=RandomMockFetchController())
                )
        """
        self.transport = transport

    def set_stats_recorder(self, stats_recorder: StatsRecorder) -> None:
        self.stats_recorder = stats_recorder

    def set_retry_detector(self, retry_detector: RetryDetector) -> None:
        self.retry_detector = retry_detector

    def set_debug_enabled(self, debug_enabled: bool) -> None:
        self.debug_enabled = debug_enabled

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        content: Optional[bytes] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        """
        Fetch a URL, retrying rate limited and transiently failing responses.
        
        Args:
            url: Absolute target URL
            method: HTTP method
            headers: Request headers
            params: Query string parameters
            json: JSON-serializable body
            content: Raw body bytes
            timeout: Per-attempt timeout override in seconds
            cancel_event: Setting this event during a retry wait aborts the request
        
        Returns:
            The final response (possibly a 429/500/503 if retries ran out)
        
        Raises:
            RetryCancelledError: cancel_event was set while waiting to retry
            TransportError: The transport failed to obtain a response
        """
        request = FetchRequest(
            url=url,
            method=method,
            headers=headers or {},
            params=params or {},
            json_body=json,
            content=content,
            timeout=timeout,
        )
        return await self.fetch_request(request, cancel_event=cancel_event)

    async def fetch_request(
        self,
        request: FetchRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        """
        Drive one logical request to completion.
        
        See `fetch` for semantics.
        """
        # Collaborators are captured once so a logical request never mixes them.
        transport = self.transport
        stats_recorder = self.stats_recorder
        retry_detector = self.retry_detector
        debug_enabled = self.debug_enabled

        remaining_retries = self.options.max_retries
        last_retry_delay_millis = 0.0
        attempt = 0

        while True:
            attempt += 1
            stats_recorder.log_fetch_attempt()
            response = await transport.fetch(request)

            retry_info = retry_detector.compute_retry_info(
                remaining_retries, last_retry_delay_millis, self.options, response
            )

            if retry_info is None:
                if debug_enabled:
                    logger.info(
                        "Fetch complete",
                        url=request.url,
                        status_code=response.status_code,
                        attempt=attempt,
                        remaining_retries=remaining_retries,
                    )
                return response

            if attempt > self.options.max_retries:
                logger.warning(
                    "Retry detector exceeded retry budget, returning last response",
                    url=request.url,
                    status_code=response.status_code,
                    attempt=attempt,
                    max_retries=self.options.max_retries,
                )
                return response

            if debug_enabled:
                logger.info(
                    "Fetch was not successful, delaying before retry",
                    url=request.url,
                    status_code=response.status_code,
                    attempt=attempt,
                    retry_delay_millis=retry_info.retry_delay_millis,
                    remaining_retries=retry_info.remaining_retries,
                )

            await self._delay(retry_info.retry_delay_millis, cancel_event, response)
            stats_recorder.log_retry(retry_info.retry_delay_millis)

            if debug_enabled:
                logger.info("Retrying fetch", url=request.url, next_attempt=attempt + 1)

            remaining_retries = retry_info.remaining_retries
            last_retry_delay_millis = retry_info.retry_delay_millis

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "RateLimitingFetch":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _delay(
        self,
        delay_millis: float,
        cancel_event: Optional[asyncio.Event],
        last_response: httpx.Response,
    ) -> None:
        delay_seconds = delay_millis / 1000.0
        if cancel_event is None:
            await asyncio.sleep(delay_seconds)
            return

        if not cancel_event.is_set():
            try:
                await asyncio.wait_for(cancel_event.wait(), timeout=delay_seconds)
            except asyncio.TimeoutError:
                return

        logger.info(
            "Retry wait cancelled",
            status_code=last_response.status_code,
            delay_millis=delay_millis,
        )
        raise RetryCancelledError(
            "Fetch cancelled while waiting to retry",
            last_response=last_response,
            details={"status_code": last_response.status_code, "delay_millis": delay_millis},
        )

    @staticmethod
    def _validate_options(options: RateLimitingOptions) -> None:
        # Comparisons are written so NaN fails them.
        if not options.max_retries >= 0:
            _raise_invalid(options, "max_retries", ">= 0")
        if not (math.isfinite(options.max_retry_delay_millis) and options.max_retry_delay_millis > 0):
            _raise_invalid(options, "max_retry_delay_millis", "a finite number > 0")
        if not (
            math.isfinite(options.max_jitter_multiplier)
            and options.max_jitter_multiplier >= MIN_JITTER_MULTIPLIER
        ):
            _raise_invalid(options, "max_jitter_multiplier", f"a finite number >= {MIN_JITTER_MULTIPLIER}")
        if not math.isfinite(options.backoff_multiplier):
            _raise_invalid(options, "backoff_multiplier", "a finite number")
        if not math.isfinite(options.initial_retry_delay_millis):
            _raise_invalid(options, "initial_retry_delay_millis", "a finite number")


def _raise_invalid(options: RateLimitingOptions, field: str, requirement: str) -> None:
    value = getattr(options, field)
    raise InvalidOptionsError(
        f"Invalid RateLimitingFetch options: {field} is {value}, but it must be {requirement}",
        details={"field": field, "value": value},
    )
