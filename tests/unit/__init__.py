"""
Unit tests for rate limiting fetch.

Test individual components in isolation:
- Data models and settings
- Retry detector (classification, Retry-After, backoff, jitter)
- RateLimitingFetch (attempt loop, stats, cancellation)
- Transports (httpx, mocking) and stats recorders
"""
