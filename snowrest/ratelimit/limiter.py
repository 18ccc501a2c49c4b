"""Ratelimiter owning every route bucket and the global quota state."""

import asyncio
from typing import Dict, Optional

from snowrest.core.config import Settings, settings as default_settings
from snowrest.core.logging import get_logger, get_log_context
from snowrest.ratelimit.bucket import Job, LocalBucket
from snowrest.ratelimit.models import GlobalRateLimit
from snowrest.ratelimit.routes import routify

logger = get_logger(__name__)


class Ratelimiter:
    """Ratelimiter used for handling the rate limits imposed by the REST API.

    Buckets are created lazily per route key and live as long as the
    limiter. The global state is a single ``GlobalRateLimit`` cell handed
    to every bucket by reference.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings
        self.buckets: Dict[str, LocalBucket] = {}
        self.global_limit = GlobalRateLimit()

    @property
    def is_global(self) -> bool:
        return self.global_limit.active

    @property
    def global_reset_ms(self) -> int:
        return self.global_limit.reset_ms

    def routify(self, path: str, method: str) -> str:
        return routify(path, method)

    def get_bucket(self, route: str) -> LocalBucket:
        """Return the bucket for a route key, creating it on first use."""
        bucket = self.buckets.get(route)
        if bucket is None:
            bucket = LocalBucket(
                self.global_limit,
                route=route,
                limit=self.settings.bucket_default_limit,
                remaining=self.settings.bucket_default_remaining,
                reset_ms=self.settings.bucket_default_reset_ms,
            )
            self.buckets[route] = bucket
            logger.debug("Created rate limit bucket", extra=get_log_context(route=route))
        return bucket

    def queue(self, fn: Job, path: str, method: str) -> asyncio.Future:
        """Queue a REST call to be executed once its bucket admits it.

        Args:
            fn: Job to run; receives the bucket it runs against
            path: Endpoint of the request
            method: HTTP method used by the request

        Returns:
            Future settled with the job's outcome
        """
        return self.get_bucket(self.routify(path, method)).queue(fn)
