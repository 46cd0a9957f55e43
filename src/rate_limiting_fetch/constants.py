"""
Read-only constants shared by the retry detector and the mocking transport.
"""

TOO_MANY_REQUESTS_STATUS_CODE = 429
INTERNAL_SERVER_ERROR_STATUS_CODE = 500
SERVICE_UNAVAILABLE_STATUS_CODE = 503

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset(
    {
        TOO_MANY_REQUESTS_STATUS_CODE,
        INTERNAL_SERVER_ERROR_STATUS_CODE,
        SERVICE_UNAVAILABLE_STATUS_CODE,
    }
)

# Jitter never shortens a delay, so a server-mandated Retry-After is only ever extended.
MIN_JITTER_MULTIPLIER = 1.0

RETRY_AFTER_HEADER = "Retry-After"

# Longest Retry-After delay-seconds accepted (about 31 years); longer values are treated as unparseable.
MAX_RETRY_AFTER_DIGITS = 9
