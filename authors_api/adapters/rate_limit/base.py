"""Rate limiter interfaces.

The API should depend on this abstraction (not the concrete implementation)
so we can swap storage backends later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

# Seconds per supported window unit
UNIT_SECONDS: dict[str, int] = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 604800,
}


@dataclass(frozen=True)
class QuotaClass:
    """Named rate limit policy: how many requests are allowed per unit.

    Attributes:
        name: Stable identifier; counters are kept per (client, name).
        unit: Window unit, one of ``UNIT_SECONDS``.
        usage_per_unit: Requests allowed per window.
        authenticated_usage_per_unit: Allowance for authenticated clients.
            Falls back to ``usage_per_unit`` when not set.
    """

    name: str
    unit: str
    usage_per_unit: int
    authenticated_usage_per_unit: int | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name must be a non-empty string")
        if self.unit not in UNIT_SECONDS:
            raise ValueError(
                f"unit must be one of {', '.join(UNIT_SECONDS)}; got {self.unit!r}"
            )
        if self.usage_per_unit < 1:
            raise ValueError("usage_per_unit must be >= 1")
        if self.authenticated_usage_per_unit is not None and self.authenticated_usage_per_unit < 1:
            raise ValueError("authenticated_usage_per_unit must be >= 1")

    @property
    def window_seconds(self) -> int:
        return UNIT_SECONDS[self.unit]

    def limit_for(self, *, authenticated: bool = False) -> int:
        """Return the allowance that applies to the caller."""
        if authenticated and self.authenticated_usage_per_unit is not None:
            return self.authenticated_usage_per_unit
        return self.usage_per_unit

    def describe(self, *, authenticated: bool = False) -> str:
        """Human readable quota, e.g. ``"200 per second"``."""
        return f"{self.limit_for(authenticated=authenticated)} per {self.unit}"


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check/consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(
        self,
        key: str,
        quota: QuotaClass,
        *,
        cost: int = 1,
        authenticated: bool = False,
    ) -> RateLimitResult:
        """Consume rate limit budget for a given key under a quota class.

        Args:
            key: Unique client identifier (e.g., API key, IP address).
            quota: Quota class the request is accounted against.
            cost: Units to consume (default 1).
            authenticated: Whether the client presented valid credentials.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: str) -> None:
        """Forget every window tracked for a client."""
        raise NotImplementedError

    @abstractmethod
    def reset_all(self) -> None:
        """Forget every window of every client."""
        raise NotImplementedError
