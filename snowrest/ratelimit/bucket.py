"""Per-route rate limit bucket.

A bucket queues jobs for one route key and admits them in FIFO order while
tokens remain. When the route (or the whole account) runs out of quota, a
reset timer is scheduled on the event loop and the queue resumes once it
fires.
"""

import asyncio
import inspect
from collections import deque
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Deque, Optional, Set, Union

from snowrest.core.config import settings
from snowrest.core.logging import get_logger, get_log_context
from snowrest.ratelimit.models import BucketState, GlobalRateLimit, RateLimitUpdate

logger = get_logger(__name__)

Job = Callable[["LocalBucket"], Union[Awaitable[Any], Any]]


@dataclass
class QueuedJob:
    """A job waiting for admission and the future its caller awaits."""
    fn: Job
    future: asyncio.Future


class LocalBucket:
    """Token bucket for a single route key.

    Remaining tokens are not decremented when a job is admitted; they are
    corrected from the response headers through ``apply_update()``. More
    than ``limit`` jobs can therefore start within one window when the
    server is slow to answer.

    Attributes:
        limit: Maximum tokens per window
        remaining: Tokens left in the current window
        reset_ms: Length of the current window in milliseconds
    """

    def __init__(
        self,
        global_limit: GlobalRateLimit,
        route: Optional[str] = None,
        limit: Optional[int] = None,
        remaining: Optional[int] = None,
        reset_ms: Optional[int] = None,
    ):
        """Create a new bucket.

        Args:
            global_limit: Global rate limit state shared with the limiter
            route: Route key this bucket belongs to (used for logging)
            limit: Initial token limit
            remaining: Initial tokens before the first response
            reset_ms: Initial window length in milliseconds
        """
        self.route = route
        self.limit = settings.bucket_default_limit if limit is None else limit
        self.remaining = (
            settings.bucket_default_remaining if remaining is None else remaining
        )
        self.reset_ms = settings.bucket_default_reset_ms if reset_ms is None else reset_ms
        self._global = global_limit
        self._queue: Deque[QueuedJob] = deque()
        self._reset_handle: Optional[asyncio.TimerHandle] = None
        self._reset_is_global = False
        self._running: Set[asyncio.Task] = set()

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    @property
    def reset_pending(self) -> bool:
        return self._reset_handle is not None

    @property
    def state(self) -> BucketState:
        if not self._queue:
            return BucketState.IDLE
        if self._global.active:
            return BucketState.DRAINED_GLOBAL
        if self.remaining == 0:
            return BucketState.DRAINED_LOCAL
        return BucketState.ADMITTING

    def queue(self, fn: Job) -> asyncio.Future:
        """Queue a job to be executed.

        Args:
            fn: Callable receiving this bucket; may return an awaitable

        Returns:
            Future resolved with the job's result or failed with its exception
        """
        future = asyncio.get_running_loop().create_future()
        self._queue.append(QueuedJob(fn, future))
        self.check_queue()
        return future

    def check_queue(self) -> None:
        """Admit the head job, or schedule a reset if quota is exhausted."""
        if not self._queue:
            return
        if self._global.active:
            logger.debug(
                "Global rate limit active, deferring queue",
                extra=get_log_context(route=self.route, reset_ms=self._global.reset_ms),
            )
            self._schedule_reset(self._global.reset_ms, from_global=True)
            return
        if self.remaining == 0:
            logger.debug(
                "Bucket drained, deferring queue",
                extra=get_log_context(route=self.route, reset_ms=self.reset_ms),
            )
            self._schedule_reset(self.reset_ms)
            return
        self._start(self._queue.popleft())

    def reset_remaining(self, from_global: bool = False) -> None:
        """Restore tokens to the limit and continue the queue."""
        if from_global:
            self._global.clear()
        self.remaining = self.limit
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
        self.check_queue()

    def drop_queue(self) -> None:
        """Discard every pending job without resolving or failing it."""
        self._queue.clear()

    def apply_update(self, update: RateLimitUpdate) -> None:
        """Apply quota values read from a response."""
        if update.reset_ms is not None:
            self.reset_ms = update.reset_ms
        self.remaining = update.remaining
        if update.limit is not None:
            self.limit = update.limit

    def _schedule_reset(self, delay_ms: int, from_global: bool = False) -> None:
        # One pending timer per bucket; the reset callback clears it.
        # A global cooldown replaces a pending local timer.
        if self._reset_handle is not None:
            if not from_global or self._reset_is_global:
                return
            self._reset_handle.cancel()
        loop = asyncio.get_running_loop()
        self._reset_is_global = from_global
        self._reset_handle = loop.call_later(
            max(0, delay_ms) / 1000, partial(self._on_reset_timer, from_global)
        )

    def _on_reset_timer(self, from_global: bool) -> None:
        self._reset_handle = None
        self.reset_remaining(from_global=from_global)

    def _start(self, job: QueuedJob) -> None:
        task = asyncio.get_running_loop().create_task(self._invoke(job.fn))
        self._running.add(task)
        task.add_done_callback(partial(self._on_job_done, job))

    async def _invoke(self, fn: Job) -> Any:
        result = fn(self)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _on_job_done(self, job: QueuedJob, task: asyncio.Task) -> None:
        self._running.discard(task)
        if task.cancelled():
            if not job.future.done():
                job.future.cancel()
        else:
            error = task.exception()
            if not job.future.done():
                if error is not None:
                    job.future.set_exception(error)
                else:
                    job.future.set_result(task.result())
        self.check_queue()
