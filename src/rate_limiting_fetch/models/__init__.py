"""
Data models for rate limiting fetch.

Includes:
- RateLimitingOptions (immutable retry/backoff configuration)
- FetchRequest (request descriptor replayed unchanged on every attempt)
- RetryInfo (per-decision state carried into the next attempt)
"""

from rate_limiting_fetch.models.options import NON_UI_CONTEXT_DEFAULTS, RateLimitingOptions
from rate_limiting_fetch.models.request import FetchRequest
from rate_limiting_fetch.models.retry_info import RetryInfo

__all__ = [
    "RateLimitingOptions",
    "NON_UI_CONTEXT_DEFAULTS",
    "FetchRequest",
    "RetryInfo",
]
