from __future__ import annotations

from authors_api.api.routes.authors import build_authors_router
from authors_api.api.routes.health import router as health_router

__all__ = ["build_authors_router", "health_router"]
