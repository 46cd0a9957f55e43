"""
Configuration settings for rate limiting fetch.

All settings are loaded from environment variables prefixed with
RATE_LIMITING_FETCH_ (e.g. RATE_LIMITING_FETCH_MAX_RETRIES=3), with
sensible defaults. A .env file is honored for local development.

Nothing here is loaded at import time; Settings() is built on demand by
RateLimitingFetch.from_settings and configure_logging_from_settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMITING_FETCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Application ===
    DEBUG: bool = False  # Narrate every attempt/retry in the logs
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    
    # === Retry & Backoff (milliseconds) ===
    MAX_RETRIES: int = 2
    MAX_RETRY_DELAY_MILLIS: float = 60000
    BACKOFF_MULTIPLIER: float = 2.0
    INITIAL_RETRY_DELAY_MILLIS: float = 5000
    MAX_JITTER_MULTIPLIER: float = 1.3
    RETRY_ON_ZERO_DELAY: bool = False
    
    # === HTTP Transport ===
    HTTP_TIMEOUT: float = 30.0  # seconds, per attempt
    HTTP_MAX_CONNECTIONS: int = 10
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 5
    
    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = False

