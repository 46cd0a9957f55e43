"""
Retry decision result.

RetryInfo is produced fresh by the retry detector for every retryable
response that still has budget left, consumed by the orchestrator for the
next attempt, then discarded.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryInfo:
    """
    State to carry into the next attempt of one logical request.
    
    Attributes:
        remaining_retries: Retry budget left after this retry is taken
        retry_delay_millis: Jittered delay to wait before the next attempt
    """

    remaining_retries: int
    retry_delay_millis: float

    def __post_init__(self) -> None:
        """Validate retry info invariants."""
        if not self.remaining_retries >= 0:
            raise ValueError("remaining_retries must be >= 0")
        
        if not self.retry_delay_millis >= 0:
            raise ValueError("retry_delay_millis must be >= 0")

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_millis / 1000.0
