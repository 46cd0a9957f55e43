"""
Stats recorders for rate limiting fetch.

RateLimitingFetch reports every transport invocation and every retry to an
injected StatsRecorder. The no-op recorder is the default; the accumulating
recorders are safe to share between concurrent fetches, including fetches
running on different threads.
"""

import threading
from dataclasses import dataclass
from typing import Protocol

import structlog

from rate_limiting_fetch.monitoring.metrics import (
    fetch_attempts_total,
    fetch_retries_total,
    fetch_retry_delay_seconds,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FetchStats:
    """
    Snapshot of accumulated fetch statistics.
    
    Attributes:
        fetch_attempt_count: Transport invocations (initial attempts + retries)
        fetch_retry_count: Retries issued
        total_fetch_retry_delay: Sum of jittered retry delays in milliseconds
    """

    fetch_attempt_count: int = 0
    fetch_retry_count: int = 0
    total_fetch_retry_delay: float = 0.0

    @property
    def average_fetch_retry_delay(self) -> float | None:
        """Average retry delay in milliseconds, or None if no retries happened."""
        if not self.fetch_retry_count:
            return None
        return self.total_fetch_retry_delay / self.fetch_retry_count


class StatsRecorder(Protocol):
    """
    Protocol for recording fetch attempts and retries.
    """

    def log_fetch_attempt(self) -> None:
        ...

    def log_retry(self, delay_millis: float) -> None:
        ...

    def get_stats(self) -> FetchStats:
        ...

    def report(self) -> None:
        ...


class NoopStatsRecorder:
    """
    Discards everything; get_stats() always returns zeroes.
    """

    def log_fetch_attempt(self) -> None:
        pass

    def log_retry(self, delay_millis: float) -> None:
        pass

    def get_stats(self) -> FetchStats:
        return FetchStats()

    def report(self) -> None:
        pass


class SimpleStatsRecorder:
    """
    Accumulates counters in memory across all fetches sharing the recorder.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._fetch_attempt_count = 0
        self._fetch_retry_count = 0
        self._total_fetch_retry_delay = 0.0

    def log_fetch_attempt(self) -> None:
        with self._lock:
            self._fetch_attempt_count += 1

    def log_retry(self, delay_millis: float) -> None:
        with self._lock:
            self._fetch_retry_count += 1
            self._total_fetch_retry_delay += delay_millis

    def get_stats(self) -> FetchStats:
        with self._lock:
            return FetchStats(
                fetch_attempt_count=self._fetch_attempt_count,
                fetch_retry_count=self._fetch_retry_count,
                total_fetch_retry_delay=self._total_fetch_retry_delay,
            )

    def report(self) -> None:
        """Log the accumulated stats (delays in seconds)."""
        stats = self.get_stats()
        average = stats.average_fetch_retry_delay
        logger.info(
            "Rate limiting fetch stats",
            fetch_attempt_count=stats.fetch_attempt_count,
            fetch_retry_count=stats.fetch_retry_count,
            total_fetch_retry_delay_seconds=stats.total_fetch_retry_delay / 1000,
            average_fetch_retry_delay_seconds=average / 1000 if average is not None else None,
        )


class PrometheusStatsRecorder(SimpleStatsRecorder):
    """
    Accumulating recorder that also exports Prometheus metrics.
    """

    def log_fetch_attempt(self) -> None:
        super().log_fetch_attempt()
        fetch_attempts_total.inc()

    def log_retry(self, delay_millis: float) -> None:
        super().log_retry(delay_millis)
        fetch_retries_total.inc()
        fetch_retry_delay_seconds.observe(delay_millis / 1000.0)
