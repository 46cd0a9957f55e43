"""
Rate limiting fetch exceptions.

Exhausting the retry budget is not an error: the last response is returned
to the caller as-is. Only invalid configuration and cancellation surface
as exceptions from this layer.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class RateLimitingFetchError(Exception):
    """
    Base exception for all rate limiting fetch errors.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidOptionsError(RateLimitingFetchError, ValueError):
    """
    Raised when RateLimitingFetch is constructed with options that violate
    an invariant (negative retry budget, non-positive delay ceiling, jitter
    multiplier below 1.0).
    
    Never retried; the caller must fix its configuration.
    """
    pass


class RetryCancelledError(RateLimitingFetchError):
    """
    Raised when a caller-supplied cancel event is set while waiting
    between attempts.
    
    Attributes:
        last_response: Response received on the attempt before the wait
    """

    def __init__(
        self,
        message: str,
        last_response: "httpx.Response",
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.last_response = last_response
