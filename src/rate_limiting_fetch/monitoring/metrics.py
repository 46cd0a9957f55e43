"""Custom Prometheus metrics for rate limiting fetch.

These metrics are registered on the default prometheus_client registry and
are updated by PrometheusStatsRecorder. Alert rules should be configured for:
- rate_limiting_fetch_retries_total (high retry rate indicates throttling)
- rate_limiting_fetch_retry_delay_seconds (long waits hurt caller latency)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

fetch_attempts_total = Counter(
    "rate_limiting_fetch_attempts_total",
    "Total transport invocations, initial attempts and retries alike",
)

# === Retry Metrics ===

fetch_retries_total = Counter(
    "rate_limiting_fetch_retries_total",
    "Total retries issued after a 429/500/503 response",
)
"""
Retries counter.

Alert thresholds:
- WARN: retries / attempts > 10%
- CRITICAL: retries / attempts > 30%
"""

fetch_retry_delay_seconds = Histogram(
    "rate_limiting_fetch_retry_delay_seconds",
    "Jittered delay waited before each retry, in seconds",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)
"""
Retry delay histogram.

Buckets span fast backoff (100ms) to a capped 60s delay with jitter headroom.
"""
