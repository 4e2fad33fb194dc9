"""Endpoint policy dependency for FastAPI routes.

This module wires the rate limiting adapter and the cache policy of an
endpoint into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Explicit state: the limiter lives on ``app.state`` and is created by the
  app factory, never as hidden module state.
- Fail fast: the quota is checked before the route touches the store.

Rate limiting strategy:
- Fixed window per client and quota class.
- Client identity is a configured API key, otherwise the client IP.
"""

from __future__ import annotations

import logging
from typing import Annotated, Awaitable, Callable

from fastapi import Header, Request, Response

from authors_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from authors_api.core.auth import hash_api_key, is_valid_api_key
from authors_api.core.config import settings
from authors_api.core.errors import RateLimitAppError
from authors_api.core.policies import EndpointPolicy

logger = logging.getLogger(__name__)


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""
    return request.app.state.rate_limiter


def build_client_key(request: Request, x_api_key: str | None) -> str:
    """Build the limiter key for the current request.

    Only a configured API key identifies a client; an unknown key falls back
    to the client IP so rotating bogus keys never opens a fresh window.

    Args:
        request: FastAPI request.
        x_api_key: API key value from the X-API-Key header.

    Returns:
        str: Namespaced limiter key.
    """

    if is_valid_api_key(x_api_key):
        return f"api_key:{x_api_key}"

    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _rate_limit_headers(policy: EndpointPolicy, result: RateLimitResult, authenticated: bool) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": policy.quota.describe(authenticated=authenticated),
        "X-RateLimit-Remaining": str(result.remaining),
    }


def enforce_policy(policy: EndpointPolicy) -> Callable[..., Awaitable[None]]:
    """Create the FastAPI dependency applying ``policy`` to a route.

    The returned dependency consumes one unit of the policy's quota class
    and, when allowed, stamps rate limit and cache headers on the response.

    Args:
        policy: Policy declared for the route at registration time.

    Returns:
        Async dependency to use with ``Depends``.
    """

    async def _dependency(
        request: Request,
        response: Response,
        x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    ) -> None:
        """Raises RateLimitAppError (HTTP 429) once the quota is exhausted."""

        if policy.cache is not None:
            response.headers.update(policy.cache.headers())

        if not settings.app.rate_limit_enabled:
            return

        limiter = get_rate_limiter(request)
        authenticated = is_valid_api_key(x_api_key)
        key = build_client_key(request, x_api_key)
        key_type = "api_key" if authenticated else "ip"

        result = limiter.consume(key, policy.quota, authenticated=authenticated)
        log_extra = {
            "action": policy.action,
            "quota": policy.quota.name,
            "key_type": key_type,
            "key_hash": hash_api_key(key),
            "limit": result.limit,
            "remaining": result.remaining,
            "unit": policy.quota.unit,
        }

        if result.allowed:
            logger.debug("rate_limit.allowed", extra=log_extra)
            if settings.app.rate_limit_include_headers:
                response.headers.update(_rate_limit_headers(policy, result, authenticated))
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning("rate_limit.exceeded", extra={**log_extra, "retry_after_s": retry_after})

        headers: dict[str, str] = {}
        if settings.app.rate_limit_include_headers:
            headers.update(_rate_limit_headers(policy, result, authenticated))
            headers["Retry-After"] = str(retry_after)
            headers["X-RateLimit-Reset"] = str(result.reset_at)

        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Rate limit exceeded. Try again later.",
            details={
                "quota": policy.quota.describe(authenticated=authenticated),
                "retry_after": retry_after,
            },
            headers=headers,
        )

    _dependency.__name__ = f"enforce_{policy.action}_policy"
    return _dependency
