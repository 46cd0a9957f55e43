"""
Retry orchestration for rate limited HTTP requests.

Main Components:
    - RateLimitingFetch: Drives attempts, waits and the final response
    - RetryDetector: Protocol deciding whether/when to retry a response
    - DefaultRetryDetector: 429/500/503 with backoff, Retry-After and jitter
    - InvalidOptionsError, RetryCancelledError: Error taxonomy

Usage:
    >>> from rate_limiting_fetch.retry import RateLimitingFetch
    >>> rate_limiting_fetch = RateLimitingFetch(options)
    >>> response = await rate_limiting_fetch.fetch(url)
"""

from rate_limiting_fetch.retry.detector import DefaultRetryDetector, RetryDetector
from rate_limiting_fetch.retry.engine import RateLimitingFetch
from rate_limiting_fetch.retry.exceptions import (
    InvalidOptionsError,
    RateLimitingFetchError,
    RetryCancelledError,
)

__all__ = [
    "RateLimitingFetch",
    "RetryDetector",
    "DefaultRetryDetector",
    "RateLimitingFetchError",
    "InvalidOptionsError",
    "RetryCancelledError",
]
