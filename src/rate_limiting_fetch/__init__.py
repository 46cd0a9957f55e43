"""
Rate limiting fetch for REST API clients.

Wraps a single-exchange HTTP transport and transparently retries requests
rejected with 429 Too Many Requests, 500 Internal Server Error or
503 Service Unavailable:
- Exponential backoff between attempts
- Server-supplied Retry-After hints honored (never shortened)
- Upward-only jitter to spread out concurrently retrying clients

Architecture: RateLimitingFetch orchestrator + pluggable RetryDetector +
injectable transports (httpx, mocking) and stats recorders.
"""

from rate_limiting_fetch.constants import (
    INTERNAL_SERVER_ERROR_STATUS_CODE,
    MIN_JITTER_MULTIPLIER,
    RETRYABLE_STATUS_CODES,
    SERVICE_UNAVAILABLE_STATUS_CODE,
    TOO_MANY_REQUESTS_STATUS_CODE,
)
from rate_limiting_fetch.logging_config import configure_logging, configure_logging_from_settings
from rate_limiting_fetch.models.options import NON_UI_CONTEXT_DEFAULTS, RateLimitingOptions
from rate_limiting_fetch.models.request import FetchRequest
from rate_limiting_fetch.models.retry_info import RetryInfo
from rate_limiting_fetch.monitoring.stats import (
    FetchStats,
    NoopStatsRecorder,
    PrometheusStatsRecorder,
    SimpleStatsRecorder,
    StatsRecorder,
)
from rate_limiting_fetch.retry.detector import DefaultRetryDetector, RetryDetector
from rate_limiting_fetch.retry.engine import RateLimitingFetch
from rate_limiting_fetch.retry.exceptions import (
    InvalidOptionsError,
    RateLimitingFetchError,
    RetryCancelledError,
)
from rate_limiting_fetch.transport import (
    BaseTransport,
    HttpxTransport,
    MockFetchController,
    MockFetchInfo,
    MockingTransport,
    RandomMockFetchController,
    SimpleMockFetchController,
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
)

__version__ = "0.1.0"

__all__ = [
    "TOO_MANY_REQUESTS_STATUS_CODE",
    "INTERNAL_SERVER_ERROR_STATUS_CODE",
    "SERVICE_UNAVAILABLE_STATUS_CODE",
    "RETRYABLE_STATUS_CODES",
    "MIN_JITTER_MULTIPLIER",
    "configure_logging",
    "configure_logging_from_settings",
    "RateLimitingOptions",
    "NON_UI_CONTEXT_DEFAULTS",
    "FetchRequest",
    "RetryInfo",
    "FetchStats",
    "StatsRecorder",
    "NoopStatsRecorder",
    "SimpleStatsRecorder",
    "PrometheusStatsRecorder",
    "RetryDetector",
    "DefaultRetryDetector",
    "RateLimitingFetch",
    "RateLimitingFetchError",
    "InvalidOptionsError",
    "RetryCancelledError",
    "BaseTransport",
    "HttpxTransport",
    "MockingTransport",
    "MockFetchInfo",
    "MockFetchController",
    "SimpleMockFetchController",
    "RandomMockFetchController",
    "TransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
]
