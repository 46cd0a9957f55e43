"""
Custom exceptions for the transport layer.

Transports never retry and never raise for HTTP error statuses; a response
with any status code is a successful exchange. These exceptions cover the
cases where no response was obtained at all.
"""


class TransportError(Exception):
    """
    Base exception for all transport errors.
    
    All transport-specific exceptions inherit from this to allow catching
    any network-level failure with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportConnectionError(TransportError):
    """
    Raised when unable to reach the target server.
    
    Includes DNS failures, refused connections, dropped connections and
    protocol errors. Not retried by RateLimitingFetch.
    """
    pass


class TransportTimeoutError(TransportConnectionError):
    """
    Raised when a single exchange exceeds its timeout.
    """
    pass
