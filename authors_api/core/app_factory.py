from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (state, metadata, middleware, handlers,
routers) so each app instance owns its own store and rate limiter.
"""

from fastapi import FastAPI

from authors_api.adapters.rate_limit.base import AbstractRateLimiter
from authors_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from authors_api.api.routes import build_authors_router, health_router
from authors_api.core.config import settings
from authors_api.core.exception_handlers import setup_exception_handlers
from authors_api.core.logging import configure_logging
from authors_api.core.middleware import request_id_middleware
from authors_api.core.openapi import apply_openapi_customizations
from authors_api.core.policies import AuthorPolicies, build_author_policies
from authors_api.services.author_service import AuthorService
from authors_api.services.author_store import AuthorStore


def create_app(
    *,
    store: AuthorStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    policies: AuthorPolicies | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store: Author store to serve; a seeded in-memory store by default.
        rate_limiter: Limiter shared by every route; in-memory by default.
        policies: Endpoint policies; built from settings by default.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Authors API",
        description=(
            "Rate-limited, cacheable CRUD endpoints for authors. Reads advertise "
            "Cache-Control/Expires headers, every route is accounted against a "
            "per-client quota class, and replace/patch/delete require X-API-Key."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    # Shared state
    app.state.author_store = store if store is not None else AuthorStore()
    app.state.rate_limiter = rate_limiter if rate_limiter is not None else InMemoryFixedWindowRateLimiter()
    app.state.author_service = AuthorService(app.state.author_store, app.state.rate_limiter)

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(build_authors_router(policies or build_author_policies()))
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags)
    apply_openapi_customizations(app)

    return app
