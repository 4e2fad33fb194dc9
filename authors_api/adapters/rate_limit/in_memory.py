"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from authors_api.adapters.rate_limit.base import AbstractRateLimiter, QuotaClass, RateLimitResult


@dataclass
class _WindowState:
    window_start: int
    reset_at: int
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per client and quota class.

    Windows are aligned on the epoch, so a ``second`` quota counts requests
    within the current wall-clock second and an ``hour`` quota within the
    current wall-clock hour.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        purge_interval: int = 1000,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
            purge_interval: Drop expired windows every this many consume calls.

        Raises:
            ValueError: If purge_interval is invalid.
        """
        if purge_interval < 1:
            raise ValueError("purge_interval must be >= 1")

        self._clock = clock
        self._purge_interval = purge_interval
        self._calls_since_purge = 0
        self._lock = threading.RLock()
        self._state_by_key: dict[tuple[str, str], _WindowState] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)

    @staticmethod
    def _get_window_bounds(now: float, window_seconds: int) -> tuple[int, int]:
        """Compute fixed-window boundaries for a given timestamp.

        Args:
            now: UNIX time in seconds.
            window_seconds: Window size of the quota class.

        Returns:
            Tuple of (window_start_epoch_seconds, reset_at_epoch_seconds).
        """
        window_start = int(now // window_seconds) * window_seconds
        reset_at = window_start + window_seconds
        return window_start, reset_at

    def _get_or_reset_state(
        self, state_key: tuple[str, str], window_start: int, reset_at: int
    ) -> _WindowState:
        """Get the current state for key or reset it when window changes.

        Args:
            state_key: (client key, quota class name).
            window_start: Current window start epoch seconds.
            reset_at: Epoch seconds when that window ends.

        Returns:
            The current window state for this key.
        """
        state = self._state_by_key.get(state_key)
        if state is None or state.window_start != window_start:
            state = _WindowState(window_start=window_start, reset_at=reset_at, count=0)
            self._state_by_key[state_key] = state
        return state

    def _purge_expired_locked(self, now: float) -> None:
        """Discard windows that ended at or before ``now``."""
        expired = [k for k, state in self._state_by_key.items() if state.reset_at <= now]
        for state_key in expired:
            del self._state_by_key[state_key]
        self._calls_since_purge = 0

    def consume(
        self,
        key: str,
        quota: QuotaClass,
        *,
        cost: int = 1,
        authenticated: bool = False,
    ) -> RateLimitResult:
        """Consume rate limit budget for the provided key.

        This method both checks the current window usage and mutates the state
        if the request is allowed. Blocked requests do not consume budget.

        Args:
            key: Unique identifier for rate limiting (e.g., API key).
            quota: Quota class the request is accounted against.
            cost: Units to consume (default 1).
            authenticated: Apply the quota's authenticated allowance.

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty or cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        limit = quota.limit_for(authenticated=authenticated)
        now = self._clock()
        window_start, reset_at = self._get_window_bounds(now, quota.window_seconds)

        with self._lock:
            self._calls_since_purge += 1
            if self._calls_since_purge >= self._purge_interval:
                self._purge_expired_locked(now)

            state = self._get_or_reset_state((key, quota.name), window_start, reset_at)

            if state.count + cost <= limit:
                state.count += cost
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=max(0, limit - state.count),
                    reset_at=reset_at,
                    retry_after_seconds=None,
                )

            return RateLimitResult(
                allowed=False,
                limit=limit,
                remaining=max(0, limit - state.count),
                reset_at=reset_at,
                retry_after_seconds=max(0, int(math.ceil(reset_at - now))),
            )

    def reset(self, key: str) -> None:
        with self._lock:
            for state_key in [k for k in self._state_by_key if k[0] == key]:
                del self._state_by_key[state_key]

    def reset_all(self) -> None:
        with self._lock:
            self._state_by_key.clear()
