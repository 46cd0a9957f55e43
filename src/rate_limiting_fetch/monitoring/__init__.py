"""Monitoring and stats instrumentation for rate limiting fetch.

Exports stats recorders and the Prometheus metrics they update.
"""

from rate_limiting_fetch.monitoring.metrics import (
    fetch_attempts_total,
    fetch_retries_total,
    fetch_retry_delay_seconds,
)
from rate_limiting_fetch.monitoring.stats import (
    FetchStats,
    NoopStatsRecorder,
    PrometheusStatsRecorder,
    SimpleStatsRecorder,
    StatsRecorder,
)

__all__ = [
    "FetchStats",
    "StatsRecorder",
    "NoopStatsRecorder",
    "SimpleStatsRecorder",
    "PrometheusStatsRecorder",
    "fetch_attempts_total",
    "fetch_retries_total",
    "fetch_retry_delay_seconds",
]
