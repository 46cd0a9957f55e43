"""
Integration tests for rate limiting fetch.

Test components together against real external services:
- HttpxTransport against a live public API
- MockingTransport injecting failures in front of the real transport
"""
