"""Rate limiting data models.

This module contains the quota update value produced from response headers
and the global rate limit state shared by every bucket.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BucketState(str, Enum):
    """Admission state of a bucket."""
    ADMITTING = "admitting"
    DRAINED_LOCAL = "drained_local"
    DRAINED_GLOBAL = "drained_global"
    IDLE = "idle"


@dataclass(frozen=True)
class RateLimitUpdate:
    """Quota values read from one response.

    ``None`` means the header was absent and the bucket keeps its value;
    ``remaining`` is always set because a missing header means 1.
    """
    remaining: int = 1
    limit: Optional[int] = None
    reset_ms: Optional[int] = None
    global_retry_after_ms: Optional[int] = None

    @property
    def is_global(self) -> bool:
        return self.global_retry_after_ms is not None


@dataclass
class GlobalRateLimit:
    """Account-wide cooldown shared by reference with every bucket.

    Written by the request handler when the global header is seen and read
    by each bucket's admission check.
    """
    active: bool = False
    reset_ms: int = 0

    def trigger(self, reset_ms: int) -> None:
        self.active = True
        self.reset_ms = max(0, reset_ms)

    def clear(self) -> None:
        self.active = False
