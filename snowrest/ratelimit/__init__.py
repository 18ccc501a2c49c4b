"""Client-side rate limiting for the REST API.

This package provides:
- Route classification (routify)
- Per-route token buckets (LocalBucket)
- The bucket registry with global quota state (Ratelimiter)
"""

from snowrest.ratelimit.bucket import LocalBucket, QueuedJob
from snowrest.ratelimit.limiter import Ratelimiter
from snowrest.ratelimit.models import BucketState, GlobalRateLimit, RateLimitUpdate
from snowrest.ratelimit.routes import is_reaction_route, routify

__all__ = [
    # Models
    "BucketState",
    "GlobalRateLimit",
    "RateLimitUpdate",
    # Routes
    "routify",
    "is_reaction_route",
    # Buckets
    "LocalBucket",
    "QueuedJob",
    "Ratelimiter",
]
