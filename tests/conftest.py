"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across the unit test suites.
"""

import pytest

from rate_limiting_fetch.config import Settings
from rate_limiting_fetch.models.options import NON_UI_CONTEXT_DEFAULTS, RateLimitingOptions


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.
    
    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_RETRIES = 5
    """
    return Settings(
        # === Application ===
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        
        # === Retry & Backoff ===
        MAX_RETRIES=3,
        MAX_RETRY_DELAY_MILLIS=1000,
        BACKOFF_MULTIPLIER=2.0,
        INITIAL_RETRY_DELAY_MILLIS=10,
        MAX_JITTER_MULTIPLIER=1.5,
        
        # === HTTP Transport ===
        HTTP_TIMEOUT=5.0,
        
        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Enable explicitly in metrics tests
    )


@pytest.fixture
def fast_options() -> RateLimitingOptions:
    """Options with millisecond-scale delays so real waits stay short."""
    return RateLimitingOptions(
        max_retries=2,
        max_retry_delay_millis=50,
        backoff_multiplier=2,
        initial_retry_delay_millis=5,
        max_jitter_multiplier=1.3,
    )


@pytest.fixture
def default_options() -> RateLimitingOptions:
    """The non-UI context preset (2 retries, 5s initial delay, 60s ceiling)."""
    return NON_UI_CONTEXT_DEFAULTS
