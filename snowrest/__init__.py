"""Rate limited client for the Discord REST API."""

from snowrest.client import RestClient
from snowrest.core.config import VERSION, Settings, settings
from snowrest.exceptions import (
    AttemptsExhaustedError,
    ErrorReporter,
    HTTPRequestError,
    MissingTokenError,
    QuotaExceededError,
    SnowRestError,
    TransientUpstreamError,
    ValidationError,
)
from snowrest.ratelimit import LocalBucket, Ratelimiter, routify

__version__ = VERSION

__all__ = [
    "RestClient",
    "Settings",
    "settings",
    # Rate limiting
    "LocalBucket",
    "Ratelimiter",
    "routify",
    # Errors
    "SnowRestError",
    "ValidationError",
    "MissingTokenError",
    "HTTPRequestError",
    "QuotaExceededError",
    "TransientUpstreamError",
    "AttemptsExhaustedError",
    "ErrorReporter",
]
