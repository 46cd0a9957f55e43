"""
Retry detection for rate limited and transiently failing responses.

A RetryDetector decides, from the response just received and the state of
the in-flight logical request, whether another attempt should be made and
how long to wait before it. Decisions are exception-free: a malformed
Retry-After header is logged and ignored, never propagated.

Delay selection (before jitter):
    1. Retry-After header present and an integer: 1000 * seconds
    2. Subsequent retry: min(backoff_multiplier * last delay, max_retry_delay_millis)
    3. First retry: initial_retry_delay_millis

Jitter multiplies the delay by a factor drawn from
[MIN_JITTER_MULTIPLIER, max_jitter_multiplier], so it only ever lengthens it.
"""

import random
from typing import Optional, Protocol

import httpx
import structlog

from rate_limiting_fetch.constants import (
    MAX_RETRY_AFTER_DIGITS,
    MIN_JITTER_MULTIPLIER,
    RETRY_AFTER_HEADER,
    RETRYABLE_STATUS_CODES,
)
from rate_limiting_fetch.models.options import RateLimitingOptions
from rate_limiting_fetch.models.retry_info import RetryInfo

logger = structlog.get_logger(__name__)


class RetryDetector(Protocol):
    """
    Protocol for retry detectors.
    
    RateLimitingFetch calls `compute_retry_info` once per attempt; returning
    None ends the logical request with the response just received.
    """

    def compute_retry_info(
        self,
        remaining_retries: int,
        last_retry_delay_millis: float,
        options: RateLimitingOptions,
        response: httpx.Response,
    ) -> Optional[RetryInfo]:
        """
        Decide whether to retry.
        
        Args:
            remaining_retries: Retry budget left for this logical request
            last_retry_delay_millis: Delay used before the current attempt (0 on the first attempt)
            options: Orchestrator options
            response: Response just received
        
        Returns:
            RetryInfo for the next attempt, or None if no retry should happen
        """
        ...


class DefaultRetryDetector:
    """
    Retries 429, 500 and 503 responses with backoff, Retry-After and jitter.
    
    Args:
        rng: Random source for jitter (defaults to a fresh random.Random)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def compute_retry_info(
        self,
        remaining_retries: int,
        last_retry_delay_millis: float,
        options: RateLimitingOptions,
        response: httpx.Response,
    ) -> Optional[RetryInfo]:
        if not self.is_retryable(response):
            return None
        
        unjittered_retry_delay_millis = self.compute_unjittered_delay_millis(
            last_retry_delay_millis, options, response
        )
        if remaining_retries <= 0:
            return None
        if unjittered_retry_delay_millis > 0:
            jitter_multiplier = self._random_in_range(
                MIN_JITTER_MULTIPLIER, options.max_jitter_multiplier
            )
            return RetryInfo(
                remaining_retries=remaining_retries - 1,
                retry_delay_millis=unjittered_retry_delay_millis * jitter_multiplier,
            )
        if unjittered_retry_delay_millis == 0 and options.retry_on_zero_delay:
            return RetryInfo(remaining_retries=remaining_retries - 1, retry_delay_millis=0.0)
        return None

    @staticmethod
    def is_retryable(response: httpx.Response) -> bool:
        return response.status_code in RETRYABLE_STATUS_CODES

    def compute_unjittered_delay_millis(
        self,
        last_retry_delay_millis: float,
        options: RateLimitingOptions,
        response: httpx.Response,
    ) -> float:
        """
        Compute the delay before jitter.
        
        A Retry-After of 0 (or a negative value) yields a non-positive delay,
        which stops retrying unless options.retry_on_zero_delay is set.
        """
        retry_after_seconds = self._parse_retry_after(response)
        if retry_after_seconds is not None:
            return 1000.0 * retry_after_seconds
        if last_retry_delay_millis > 0:
            return min(
                options.backoff_multiplier * last_retry_delay_millis,
                options.max_retry_delay_millis,
            )
        return float(options.initial_retry_delay_millis)

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> Optional[int]:
        retry_after_header = response.headers.get(RETRY_AFTER_HEADER)
        if not retry_after_header:
            return None
        value = retry_after_header.strip()
        # delay-seconds is ASCII 1*DIGIT; a leading "-" is kept so negatives stop retrying
        digits = value[1:] if value.startswith("-") else value
        if (
            not digits.isascii()
            or not digits.isdigit()
            or len(digits) > MAX_RETRY_AFTER_DIGITS
        ):
            logger.warning(
                "Unable to parse Retry-After header, falling back to backoff",
                retry_after=retry_after_header,
                status_code=response.status_code,
            )
            return None
        return int(value)

    def _random_in_range(self, minimum: float, maximum: float) -> float:
        return minimum + self._rng.random() * (maximum - minimum)
