"""
Rate limiting options.

Options are supplied once by the caller and held immutably by the
RateLimitingFetch orchestrator for its lifetime. Invariants (non-negative
retry budget, positive delay ceiling, jitter multiplier >= 1.0, finite
floats) are checked when the orchestrator is constructed, not here, so
that an invalid value surfaces as an InvalidOptionsError at the point of use.
"""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from rate_limiting_fetch.config import Settings


class RateLimitingOptions(BaseModel):
    """
    Retry and backoff configuration for RateLimitingFetch.
    
    All delays are expressed in milliseconds.
    """
    model_config = ConfigDict(frozen=True)
    
    max_retries: int = Field(..., description="Maximum retries, not counting the initial attempt")
    max_retry_delay_millis: float = Field(..., description="Ceiling on any backoff delay before jitter")
    backoff_multiplier: float = Field(..., description="Growth factor applied to the previous delay")
    initial_retry_delay_millis: float = Field(..., description="Delay before the first retry without a Retry-After hint")
    max_jitter_multiplier: float = Field(..., description="Upper bound of the random delay multiplier (lower bound is 1.0)")
    retry_on_zero_delay: bool = Field(
        default=False,
        description="Retry immediately when the computed delay is zero (e.g. 'Retry-After: 0')"
    )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RateLimitingOptions":
        """Build options from application settings."""
        return cls(
            max_retries=settings.MAX_RETRIES,
            max_retry_delay_millis=settings.MAX_RETRY_DELAY_MILLIS,
            backoff_multiplier=settings.BACKOFF_MULTIPLIER,
            initial_retry_delay_millis=settings.INITIAL_RETRY_DELAY_MILLIS,
            max_jitter_multiplier=settings.MAX_JITTER_MULTIPLIER,
            retry_on_zero_delay=settings.RETRY_ON_ZERO_DELAY,
        )


# Defaults for background callers that can afford to wait several seconds.
NON_UI_CONTEXT_DEFAULTS = RateLimitingOptions(
    max_retries=2,
    max_retry_delay_millis=60000,
    backoff_multiplier=2,
    initial_retry_delay_millis=5000,
    max_jitter_multiplier=1.3,
)
