"""Authors resource routes.

The router is built by the app factory so every route receives its
``EndpointPolicy`` (quota class and cache policy) at registration time.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Path, Request, status

from authors_api.core.auth import verify_api_key
from authors_api.core.config import settings
from authors_api.core.errors import NotFoundAppError
from authors_api.core.policies import AuthorPolicies
from authors_api.core.rate_limit import build_client_key, enforce_policy
from authors_api.schemas.author import Author, AuthorCreate, AuthorPatch
from authors_api.services.author_service import AuthorService

AuthorId = Annotated[int, Path(description="Author id")]


def get_author_service(request: Request) -> AuthorService:
    """Return the service owned by the running application."""
    return request.app.state.author_service


async def ensure_reset_enabled() -> None:
    """Answer 404 before any quota is charged when reset is switched off."""
    if not settings.app.reset_enabled:
        raise NotFoundAppError(code="not_found", message="Not Found")


def build_authors_router(policies: AuthorPolicies) -> APIRouter:
    """Build the Authors router with the given endpoint policies.

    Args:
        policies: Quota and cache policy of every action.

    Returns:
        APIRouter exposing list/get/create/replace/patch/delete/reset.
    """

    router = APIRouter(prefix="/authors", tags=["Authors"])

    # Registered before "/{author_id}" so "reset" is never parsed as an id
    @router.patch(
        "/reset",
        response_model=bool,
        dependencies=[Depends(ensure_reset_enabled), Depends(enforce_policy(policies.reset))],
        include_in_schema=settings.app.reset_enabled,
        summary="Reset rate limits and data (tests only)",
    )
    async def reset_authors(
        request: Request,
        service: Annotated[AuthorService, Depends(get_author_service)],
        x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    ) -> bool:
        """Clear the caller's rate limit counters and restore the seed authors."""
        return service.reset(build_client_key(request, x_api_key))

    @router.get(
        "",
        response_model=list[Author],
        dependencies=[Depends(enforce_policy(policies.index))],
        summary="Retrieve all authors",
    )
    async def list_authors(
        service: Annotated[AuthorService, Depends(get_author_service)],
    ) -> list[Author]:
        return service.list_authors()

    @router.get(
        "/{author_id}",
        response_model=Author,
        dependencies=[Depends(enforce_policy(policies.get))],
        responses={404: {"description": "Author not found"}},
        summary="Retrieve an author by id",
    )
    async def get_author(
        author_id: AuthorId,
        service: Annotated[AuthorService, Depends(get_author_service)],
    ) -> Author:
        return service.get_author(author_id)

    @router.post(
        "",
        response_model=Author,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(enforce_policy(policies.create))],
        responses={422: {"description": "Invalid name or email"}},
        summary="Create a new author",
    )
    async def create_author(
        payload: AuthorCreate,
        service: Annotated[AuthorService, Depends(get_author_service)],
    ) -> Author:
        """Create a new author from a valid name (max 100 chars) and email."""
        return service.create_author(payload.name, payload.email)

    @router.put(
        "/{author_id}",
        response_model=Author,
        dependencies=[Depends(verify_api_key), Depends(enforce_policy(policies.replace))],
        responses={404: {"description": "Author not found"}},
        summary="Replace an author",
    )
    async def replace_author(
        author_id: AuthorId,
        payload: AuthorCreate,
        service: Annotated[AuthorService, Depends(get_author_service)],
    ) -> Author:
        return service.replace_author(author_id, payload.name, payload.email)

    @router.patch(
        "/{author_id}",
        response_model=Author,
        dependencies=[Depends(verify_api_key), Depends(enforce_policy(policies.patch))],
        responses={
            304: {"description": "No field supplied"},
            404: {"description": "Author not found"},
        },
        summary="Update an author partially",
    )
    async def patch_author(
        author_id: AuthorId,
        service: Annotated[AuthorService, Depends(get_author_service)],
        payload: AuthorPatch | None = None,
    ) -> Author:
        """Modify name and/or email of an author."""
        payload = payload or AuthorPatch()
        return service.patch_author(author_id, name=payload.name, email=payload.email)

    @router.delete(
        "/{author_id}",
        response_model=Author,
        dependencies=[Depends(verify_api_key), Depends(enforce_policy(policies.delete))],
        responses={404: {"description": "Author not found"}},
        summary="Delete an author",
    )
    async def delete_author(
        author_id: AuthorId,
        service: Annotated[AuthorService, Depends(get_author_service)],
    ) -> Author:
        return service.delete_author(author_id)

    return router
