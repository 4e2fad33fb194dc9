"""Authors service orchestrating store operations and outcome mapping.

The store reports a missing id as ``None``; this service turns that into
``NotFoundAppError`` so the HTTP layer only deals with records or errors.
It also owns partial-update semantics and the administrative reset.
"""

from __future__ import annotations

import logging

from authors_api.adapters.rate_limit.base import AbstractRateLimiter
from authors_api.core.errors import NotFoundAppError, NotModifiedAppError
from authors_api.schemas.author import Author
from authors_api.services.author_store import AuthorStore

logger = logging.getLogger(__name__)


def _not_found(author_id: int) -> NotFoundAppError:
    return NotFoundAppError(
        code="author_not_found",
        message=f"Author {author_id} not found",
        details={"author_id": author_id},
    )


class AuthorService:
    """CRUD operations on authors plus test-only reset."""

    def __init__(self, store: AuthorStore, limiter: AbstractRateLimiter) -> None:
        self.store = store
        self.limiter = limiter

    def list_authors(self) -> list[Author]:
        return self.store.get_all()

    def get_author(self, author_id: int) -> Author:
        author = self.store.get(author_id)
        if author is None:
            raise _not_found(author_id)
        return author

    def create_author(self, name: str, email: str) -> Author:
        """Create an author; raises ValidationAppError on invalid input."""
        author = self.store.insert(name, email)
        logger.info("author.created", extra={"author_id": author.id})
        return author

    def replace_author(self, author_id: int, name: str, email: str) -> Author:
        author = self.store.update(author_id, name, email)
        if author is None:
            raise _not_found(author_id)
        logger.info("author.replaced", extra={"author_id": author_id})
        return author

    def patch_author(self, author_id: int, name: str | None = None, email: str | None = None) -> Author:
        """Apply only the supplied fields to an existing author.

        Args:
            author_id: Author to modify.
            name: New name, or None to keep the current one.
            email: New email, or None to keep the current one.

        Returns:
            The updated author.

        Raises:
            NotFoundAppError: If the author is absent when read or written.
            NotModifiedAppError: If neither name nor email was supplied.
        """
        current = self.get_author(author_id)

        if name is None and email is None:
            logger.info("author.not_modified", extra={"author_id": author_id})
            raise NotModifiedAppError(
                code="not_modified",
                message="No field supplied; author left unchanged",
                details={"author_id": author_id},
            )

        author = self.store.update(
            author_id,
            name if name is not None else current.name,
            email if email is not None else current.email,
        )
        if author is None:
            raise _not_found(author_id)

        logger.info(
            "author.patched",
            extra={
                "author_id": author_id,
                "fields": [f for f, v in (("name", name), ("email", email)) if v is not None],
            },
        )
        return author

    def delete_author(self, author_id: int) -> Author:
        author = self.store.delete(author_id)
        if author is None:
            raise _not_found(author_id)
        logger.info("author.deleted", extra={"author_id": author_id})
        return author

    def reset(self, client_key: str) -> bool:
        """Clear the caller's rate limit windows and restore the seed data."""
        self.limiter.reset(client_key)
        result = self.store.reset()
        logger.info("authors.reset", extra={"size": self.store.count()})
        return result
