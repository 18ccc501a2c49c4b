"""Request execution with rate limit feedback and automatic retries.

Every call is queued on the ratelimiter; when its bucket admits it, the
network request runs, the quota headers of the response are applied to the
bucket, and failures are retried according to the status code:

- 429: headers re-applied, retried without counting toward ``max_attempts``
- 502: retried, counted toward ``max_attempts``
- anything else: raised to the caller as ``HTTPRequestError``
"""

import json
import time
from collections.abc import Mapping
from email.utils import parsedate_to_datetime
from typing import Any, Optional
from urllib.parse import quote

import httpx

from snowrest.core.config import Settings, settings as default_settings
from snowrest.core.logging import get_logger, get_log_context
from snowrest.exceptions import (
    AttemptsExhaustedError,
    ErrorReporter,
    HTTPRequestError,
    QuotaExceededError,
    TransientUpstreamError,
)
from snowrest.ratelimit.bucket import LocalBucket
from snowrest.ratelimit.limiter import Ratelimiter
from snowrest.ratelimit.models import RateLimitUpdate
from snowrest.ratelimit.routes import is_reaction_route

logger = get_logger(__name__)

JSON = "json"
MULTIPART = "multipart"

AUDIT_LOG_REASON_HEADER = "X-Audit-Log-Reason"


def offset_now_ms(date_header: Optional[str], now_ms: Optional[float] = None) -> float:
    """Current time in milliseconds corrected by the server clock offset.

    Args:
        date_header: HTTP-date from the response ``Date`` header
        now_ms: Local time in milliseconds (defaults to ``time.time()``)

    Returns:
        ``now + (now - server_date)``, or ``now`` when the header is missing
        or cannot be parsed
    """
    now = time.time() * 1000 if now_ms is None else now_ms
    if not date_header:
        return now
    try:
        server_ms = parsedate_to_datetime(date_header).timestamp() * 1000
    except (TypeError, ValueError, IndexError):
        return now
    return now + (now - server_ms)


def _int_header(headers: Mapping, name: str, default: Optional[int] = None) -> Optional[int]:
    raw = headers.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        logger.debug(f"Ignoring malformed {name} header: {raw!r}")
        return default


def parse_ratelimit_headers(
    headers: Mapping,
    now_ms: float,
    reaction: bool = False,
    min_reaction_reset_ms: int = 250,
) -> RateLimitUpdate:
    """Read the quota headers of a response.

    Args:
        headers: Response headers (case-insensitive mapping)
        now_ms: Offset-corrected current time in milliseconds
        reaction: Whether the route is a reaction route
        min_reaction_reset_ms: Lower bound for reaction route windows

    Returns:
        RateLimitUpdate for the bucket (and the global state if flagged)
    """
    global_retry_after_ms = None
    if headers.get("x-ratelimit-global"):
        global_retry_after_ms = _int_header(headers, "retry_after", default=0)

    reset_ms = None
    raw_reset = headers.get("x-ratelimit-reset")
    if raw_reset:
        try:
            reset_ms = int(float(raw_reset) * 1000 - now_ms)
        except (ValueError, OverflowError):
            logger.debug(f"Ignoring malformed x-ratelimit-reset header: {raw_reset!r}")
        else:
            if reaction:
                reset_ms = max(reset_ms, min_reaction_reset_ms)

    return RateLimitUpdate(
        remaining=_int_header(headers, "x-ratelimit-remaining", default=1),
        limit=_int_header(headers, "x-ratelimit-limit"),
        reset_ms=reset_ms,
        global_retry_after_ms=global_retry_after_ms,
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    if "application/json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def _split_reason(data: Any) -> tuple[Any, dict[str, str]]:
    """Move ``reason`` out of a copy of the body into the audit log header."""
    headers: dict[str, str] = {}
    if not isinstance(data, Mapping):
        return data, headers
    payload = dict(data)
    reason = payload.pop("reason", None)
    if reason:
        headers[AUDIT_LOG_REASON_HEADER] = quote(str(reason), safe=" ")
    return payload, headers


class RequestHandler:
    """Executes REST calls through the ratelimiter.

    Attributes:
        ratelimiter: Ratelimiter used for queuing requests
        client: httpx client bound to the versioned API base URL
        error_reporter: Optional object with ``capture_exception``
        latency_ms: Duration of the last successful network call
    """

    def __init__(
        self,
        ratelimiter: Ratelimiter,
        client: httpx.AsyncClient,
        error_reporter: Optional[ErrorReporter] = None,
        config: Optional[Settings] = None,
    ):
        self.ratelimiter = ratelimiter
        self.client = client
        self.error_reporter = error_reporter
        self.settings = config or default_settings
        self.latency_ms: float = 500

    async def request(
        self,
        endpoint: str,
        method: str,
        data_type: str = JSON,
        data: Any = None,
        attempts: int = 0,
    ) -> Any:
        """Request a route from the API.

        Args:
            endpoint: Path relative to the API base URL
            method: HTTP method (get, post, put, patch, delete)
            data_type: ``json`` or ``multipart``
            data: Body or query data, if any
            attempts: Counted attempts already made

        Returns:
            Decoded response body, or None if the response carried none

        Raises:
            AttemptsExhaustedError: After ``max_attempts`` counted failures
            HTTPRequestError: On a failure that is not retried
        """
        method = method.lower()
        route = self.ratelimiter.routify(endpoint, method)
        rate_limit_retries = 0

        async def job(bucket: LocalBucket) -> Any:
            return await self._execute(bucket, route, endpoint, method, data_type, data)

        while True:
            try:
                return await self.ratelimiter.queue(job, endpoint, method)
            except HTTPRequestError as e:
                error = e

            self._report(error.cause)
            context = get_log_context(
                route=route, method=method, path=endpoint,
                attempt=attempts, status_code=error.status_code,
            )

            if attempts >= self.settings.max_attempts:
                logger.error(
                    f"Request failed after {attempts} attempts: {error}", extra=context
                )
                raise AttemptsExhaustedError(error, attempts, route=route) from error

            if isinstance(error, QuotaExceededError):
                cap = self.settings.max_rate_limit_retries
                if cap is not None and rate_limit_retries >= cap:
                    logger.error(f"Rate limit retry cap ({cap}) reached", extra=context)
                    raise error
                logger.warning(
                    f"Rate limited on {route}, retrying once the bucket resets", extra=context
                )
                rate_limit_retries += 1
                continue

            if isinstance(error, TransientUpstreamError):
                logger.warning(
                    f"Upstream 502 on {route}, retry {attempts + 1}/{self.settings.max_attempts}",
                    extra=context,
                )
                attempts += 1
                continue

            logger.error(f"Request to {route} failed: {error}", extra=context, exc_info=error)
            raise error

    async def _execute(
        self,
        bucket: LocalBucket,
        route: str,
        endpoint: str,
        method: str,
        data_type: str,
        data: Any,
    ) -> Any:
        start = time.perf_counter()
        try:
            if data_type == MULTIPART:
                response = await self._multipart_request(endpoint, method, data)
            else:
                use_params = method == "get" or "/bans" in endpoint or "/prune" in endpoint
                response = await self._request(endpoint, method, data, use_params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            response = e.response
            body = _decode_body(response)
            status = response.status_code
            if status == 429:
                update = self._apply_ratelimit_headers(bucket, route, response)
                raise QuotaExceededError(
                    e,
                    route=route,
                    retry_after_ms=update.global_retry_after_ms,
                    is_global=update.is_global,
                    response_body=body,
                ) from e
            if status == 502:
                raise TransientUpstreamError(
                    e, route=route, status_code=status, response_body=body
                ) from e
            raise HTTPRequestError(e, route=route, status_code=status, response_body=body) from e
        except httpx.HTTPError as e:
            raise HTTPRequestError(e, route=route) from e
        except Exception as e:
            # Encoding and URL errors never reach the transport
            raise HTTPRequestError(e, route=route) from e

        self.latency_ms = (time.perf_counter() - start) * 1000
        self._apply_ratelimit_headers(bucket, route, response)
        return _decode_body(response)

    def _apply_ratelimit_headers(
        self, bucket: LocalBucket, route: str, response: httpx.Response
    ) -> RateLimitUpdate:
        update = parse_ratelimit_headers(
            response.headers,
            offset_now_ms(response.headers.get("date")),
            reaction=is_reaction_route(route),
            min_reaction_reset_ms=self.settings.reaction_min_reset_ms,
        )
        if update.is_global:
            self.ratelimiter.global_limit.trigger(update.global_retry_after_ms)
            logger.warning(
                "Global rate limit hit",
                extra=get_log_context(route=route, reset_ms=update.global_retry_after_ms),
            )
        bucket.apply_update(update)
        logger.debug(
            "Applied rate limit headers",
            extra=get_log_context(
                route=route,
                status_code=response.status_code,
                remaining=bucket.remaining,
                reset_ms=bucket.reset_ms,
                duration_ms=round(self.latency_ms, 2),
            ),
        )
        return update

    def _report(self, error: BaseException) -> None:
        if self.error_reporter is None:
            return
        try:
            self.error_reporter.capture_exception(error)
        except Exception:
            logger.warning("Error reporter failed to capture exception", exc_info=True)

    async def _request(
        self, endpoint: str, method: str, data: Any, use_params: bool = False
    ) -> httpx.Response:
        """Execute a normal JSON request.

        Args:
            endpoint: Endpoint to use
            method: HTTP method to use
            data: Data to send
            use_params: Whether to send the data as query params instead of a body
        """
        payload, headers = _split_reason(data)
        if use_params:
            params = None
            if isinstance(payload, Mapping):
                params = {k: v for k, v in payload.items() if v is not None}
            return await self.client.request(method, endpoint, params=params, headers=headers)
        if payload is None:
            return await self.client.request(method, endpoint, headers=headers)
        return await self.client.request(method, endpoint, json=payload, headers=headers)

    async def _multipart_request(self, endpoint: str, method: str, data: Any) -> httpx.Response:
        """Execute a multipart/form-data request.

        ``data["file"]`` may hold ``{"name": str, "file": bytes}``; everything
        else is sent JSON-encoded in the ``payload_json`` field.
        """
        payload, headers = _split_reason(data or {})
        attachment = payload.pop("file", None) or {}
        files: dict[str, tuple] = {}
        if attachment.get("file") is not None:
            files["file"] = (attachment.get("name") or "file", attachment["file"])
        files["payload_json"] = (None, json.dumps(payload), "application/json")
        return await self.client.request(method, endpoint, files=files, headers=headers)


__all__ = [
    "JSON",
    "MULTIPART",
    "RequestHandler",
    "offset_now_ms",
    "parse_ratelimit_headers",
]
