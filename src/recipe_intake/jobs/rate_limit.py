"""
Per-owner job creation quota.

The pipeline depends on the QuotaTracker protocol only. The default tracker
keeps a moving window in a `limits` storage backend: memory:// for a single
process, or a shared backend such as redis:// when running several workers.
"""

import time
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter

QUOTA_NAMESPACE = "recipe-jobs"


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of a quota check."""

    allowed: bool
    remaining: int
    retry_after_seconds: float | None = None


@runtime_checkable
class QuotaTracker(Protocol):
    """Keyed counter with expiry."""

    def check(self, key: str) -> QuotaDecision:
        """Report whether one more unit is available, without consuming it."""
        ...

    def try_acquire(self, key: str) -> QuotaDecision:
        """Consume one unit of quota for key if available. Rejections consume nothing."""
        ...


class MovingWindowQuota:
    """
    At most max_requests per window_seconds per key, over a moving window.

    Args:
        max_requests: Requests allowed inside one window
        window_seconds: Window length
        storage_uri: `limits` storage backend, e.g. "memory://" or "redis://host:6379"
    """

    def __init__(self, max_requests: int, window_seconds: int, storage_uri: str = "memory://"):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(max_requests, window_seconds, namespace=QUOTA_NAMESPACE)
        self._storage = storage_from_string(storage_uri)
        self._limiter = MovingWindowRateLimiter(self._storage)

    def _decision(self, key: str, allowed: bool) -> QuotaDecision:
        stats = self._limiter.get_window_stats(self._item, key)
        if allowed:
            return QuotaDecision(allowed=True, remaining=stats.remaining)
        retry_after = max(0.0, stats.reset_time - time.time())
        return QuotaDecision(allowed=False, remaining=0, retry_after_seconds=retry_after)

    def check(self, key: str) -> QuotaDecision:
        return self._decision(key, self._limiter.test(self._item, key))

    def try_acquire(self, key: str) -> QuotaDecision:
        return self._decision(key, self._limiter.hit(self._item, key))

    def reset(self, key: str | None = None) -> None:
        """Forget recorded hits for one key or all keys."""
        if key is None:
            self._storage.reset()
        else:
            self._limiter.clear(self._item, key)
