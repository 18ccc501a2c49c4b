"""Custom exceptions for the snowrest client."""

from typing import Any, Protocol, runtime_checkable


class SnowRestError(Exception):
    """Base class for snowrest exceptions.

    All custom exceptions inherit from this class so callers can catch
    every library failure with a single ``except`` clause.
    """

    def __init__(self, message: str = "snowrest error"):
        self.message = message
        super().__init__(message)


class ValidationError(SnowRestError):
    """Raised when a call is rejected before any network request is made."""

    def __init__(self, message: str = "Invalid request data"):
        super().__init__(message)


class MissingTokenError(ValidationError):
    """Raised when the client is constructed without a bot token."""

    def __init__(self, message: str = "Missing token"):
        super().__init__(message)


class HTTPRequestError(SnowRestError):
    """Raised when a request fails and is not retried.

    The original ``httpx`` exception is kept as ``cause`` (and chained as
    ``__cause__``) so no diagnostic information is lost.
    """

    status_code: int | None = None

    def __init__(
        self,
        cause: BaseException,
        route: str | None = None,
        status_code: int | None = None,
        response_body: Any = None,
        message: str | None = None,
    ):
        self.cause = cause
        self.route = route
        if status_code is not None:
            self.status_code = status_code
        self.response_body = response_body
        super().__init__(message or f"Request to {route or 'unknown route'} failed: {cause}")


class QuotaExceededError(HTTPRequestError):
    """Raised for HTTP 429 Too Many Requests.

    Retried by the request handler without counting toward the attempt
    ceiling; only surfaces when the optional 429 retry cap is configured.
    """

    status_code = 429

    def __init__(
        self,
        cause: BaseException,
        route: str | None = None,
        retry_after_ms: int | None = None,
        is_global: bool = False,
        response_body: Any = None,
    ):
        self.retry_after_ms = retry_after_ms
        self.is_global = is_global
        scope = "Global" if is_global else "Route"
        super().__init__(
            cause,
            route=route,
            response_body=response_body,
            message=f"{scope} rate limit exceeded for {route or 'unknown route'}",
        )


class TransientUpstreamError(HTTPRequestError):
    """Raised for HTTP 502 Bad Gateway, retried up to the attempt ceiling."""

    status_code = 502


class AttemptsExhaustedError(SnowRestError):
    """Raised when a request keeps failing after the attempt ceiling.

    Attributes:
        cause: The error from the last attempt
        attempts: Number of counted attempts made
    """

    def __init__(self, cause: BaseException, attempts: int, route: str | None = None):
        self.cause = cause
        self.attempts = attempts
        self.route = route
        super().__init__(f"Request failed after {attempts} attempts")


@runtime_checkable
class ErrorReporter(Protocol):
    """Anything exposing ``capture_exception`` (e.g. the ``sentry_sdk`` module)."""

    def capture_exception(self, error: BaseException) -> Any: ...
