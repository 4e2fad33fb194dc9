"""Per-endpoint policies: quota class and cache behaviour.

Each route declares an ``EndpointPolicy`` when it is registered. The policy
names the action, the quota class it is accounted against and, for read
actions, the Cache-Control semantics of its responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

from authors_api.adapters.rate_limit.base import QuotaClass
from authors_api.core.config import AppSettings, settings


@dataclass(frozen=True)
class CachePolicy:
    """Cache policy for a read endpoint.

    Attributes:
        max_age: Seconds a response is considered fresh.
        max_stale: Seconds a client may keep serving it once stale.
        must_revalidate: Require revalidation after expiry.
    """

    max_age: int
    max_stale: int = 0
    must_revalidate: bool = False

    def cache_control(self) -> str:
        directives = [f"max-age={self.max_age}"]
        if self.max_stale:
            directives.append(f"max-stale={self.max_stale}")
        if self.must_revalidate:
            directives.append("must-revalidate")
        return ", ".join(directives)

    def expires(self, now: datetime | None = None) -> str:
        """HTTP-date ``max_age`` seconds from ``now``."""
        now = now or datetime.now(timezone.utc)
        return format_datetime(now + timedelta(seconds=self.max_age), usegmt=True)

    def headers(self, now: datetime | None = None) -> dict[str, str]:
        return {
            "Cache-Control": self.cache_control(),
            "Expires": self.expires(now),
        }


@dataclass(frozen=True)
class EndpointPolicy:
    """Declarative policy attached to a route at registration time."""

    action: str
    quota: QuotaClass
    cache: CachePolicy | None = None


@dataclass(frozen=True)
class AuthorPolicies:
    """Policies of every Authors action."""

    index: EndpointPolicy
    get: EndpointPolicy
    create: EndpointPolicy
    replace: EndpointPolicy
    patch: EndpointPolicy
    delete: EndpointPolicy
    reset: EndpointPolicy


def build_author_policies(app_settings: AppSettings | None = None) -> AuthorPolicies:
    """Build the Authors policies from configuration.

    Every CRUD action shares the ``default`` quota class; the reset action
    is accounted against the more permissive ``reset`` class.
    """

    cfg = app_settings or settings.app

    default_quota = QuotaClass(
        name="default",
        unit=cfg.default_rate_limit_unit,
        usage_per_unit=cfg.default_rate_limit_usage_per_unit,
        authenticated_usage_per_unit=cfg.default_rate_limit_authenticated_usage_per_unit,
    )
    reset_quota = QuotaClass(
        name="reset",
        unit=cfg.reset_rate_limit_unit,
        usage_per_unit=cfg.reset_rate_limit_usage_per_unit,
    )
    read_cache = CachePolicy(
        max_age=cfg.cache_max_age_seconds,
        max_stale=cfg.cache_max_stale_seconds,
        must_revalidate=cfg.cache_must_revalidate,
    )

    return AuthorPolicies(
        index=EndpointPolicy("list", default_quota, read_cache),
        get=EndpointPolicy("get", default_quota, read_cache),
        create=EndpointPolicy("create", default_quota),
        replace=EndpointPolicy("replace", default_quota),
        patch=EndpointPolicy("patch", default_quota),
        delete=EndpointPolicy("delete", default_quota),
        reset=EndpointPolicy("reset", reset_quota),
    )
