"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory limiter and later migrate to Redis or another shared store
without changing the API layer.
"""

from authors_api.adapters.rate_limit.base import (
    UNIT_SECONDS,
    AbstractRateLimiter,
    QuotaClass,
    RateLimitResult,
)
from authors_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "UNIT_SECONDS",
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "QuotaClass",
    "RateLimitResult",
]
