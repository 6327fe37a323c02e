"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Bounded: at most ``max_clients`` windows are kept; expired windows at the
  least recently seen end go first, then live ones in LRU order.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class _ClientWindow:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per client.

    Each client's window starts with its first request (not on a shared
    clock boundary) and restarts with the first request made after more than
    ``window_seconds`` have elapsed. Within a window at most ``limit``
    requests are admitted.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        max_clients: int = 10000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admitted requests per window.
            window_seconds: Length of a client's window in seconds.
            max_clients: Maximum number of client windows to keep.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit, window_seconds or max_clients are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        if max_clients < 1:
            raise ValueError("max_clients must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._max_clients = max_clients
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: OrderedDict[str, _ClientWindow] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._windows

    def _is_expired(self, window: _ClientWindow, now: float) -> bool:
        return now - window.window_start > self._window_seconds

    def _build_allowed_result(self, window: _ClientWindow) -> RateLimitResult:
        """Build a RateLimitResult for an admitted request."""
        return RateLimitResult(
            allowed=True,
            limit=self._limit,
            remaining=max(0, self._limit - window.count),
            reset_at=int(math.ceil(window.window_start + self._window_seconds)),
            retry_after_seconds=None,
        )

    def _build_blocked_result(self, window: _ClientWindow, now: float) -> RateLimitResult:
        """Build a RateLimitResult for a blocked request."""
        elapsed = now - window.window_start
        retry_after = max(0, int(math.ceil(self._window_seconds - elapsed)))
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=int(math.ceil(window.window_start + self._window_seconds)),
            retry_after_seconds=retry_after,
        )

    def _evict_if_over_capacity_locked(self, now: float) -> None:
        if len(self._windows) <= self._max_clients:
            return

        # Drop expired windows from the LRU end, stopping at the first live one
        expired = 0
        while len(self._windows) > self._max_clients:
            oldest_key = next(iter(self._windows))
            if not self._is_expired(self._windows[oldest_key], now):
                break
            del self._windows[oldest_key]
            expired += 1

        evicted = 0
        while len(self._windows) > self._max_clients:
            # popitem(last=False) removes the least recently seen client
            self._windows.popitem(last=False)
            evicted += 1

        logger.debug(
            "rate_limit.evicted",
            extra={
                "expired": expired,
                "lru_evicted": evicted,
                "tracked_clients": len(self._windows),
            },
        )

    def admit(self, key: str, *, now: float | None = None) -> RateLimitResult:
        """Count one request for ``key`` and decide whether it may proceed.

        Blocked requests do not increase the counter, so a client's count
        never exceeds the configured limit.

        Args:
            key: Client identifier for rate limiting (e.g., IP address).
            now: UNIX time in seconds; defaults to the configured clock.

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        if now is None:
            now = self._clock()

        with self._lock:
            window = self._windows.get(key)

            if window is None or self._is_expired(window, now):
                window = _ClientWindow(window_start=now, count=1)
                self._windows[key] = window
                self._windows.move_to_end(key)
                self._evict_if_over_capacity_locked(now)
                return self._build_allowed_result(window)

            self._windows.move_to_end(key)

            if window.count >= self._limit:
                return self._build_blocked_result(window, now)

            window.count += 1
            return self._build_allowed_result(window)
