"""In-memory author store.

Owns every author record of the process. Absence is reported as ``None``
(never as an exception) so callers decide what a missing id means; invalid
input raises ``ValidationAppError``.

Thread-safe: all reads and mutations run under a single re-entrant lock, so
id assignment and updates never race.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable

from pydantic import ValidationError

from authors_api.core.errors import ValidationAppError
from authors_api.schemas.author import Author, AuthorCreate

logger = logging.getLogger(__name__)


DEFAULT_SEED: tuple[dict[str, Any], ...] = (
    {"id": 1, "name": "Jac Wright", "email": "jacwright@gmail.com"},
    {"id": 2, "name": "Arul Kumaran", "email": "arul@luracast.com"},
)


def _validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic errors into a JSON-friendly list."""
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "invalid value"),
        }
        for err in exc.errors()
    ]


def validate_author_fields(name: Any, email: Any) -> AuthorCreate:
    """Validate name/email and return the normalized payload.

    Raises:
        ValidationAppError: If name is empty or longer than 100 characters,
            or email is not a valid address.
    """
    try:
        return AuthorCreate(name=name, email=email)
    except ValidationError as exc:
        raise ValidationAppError(
            code="validation_failed",
            message="Author name or email is invalid",
            details={"errors": _validation_errors(exc)},
        ) from exc


class AuthorStore:
    """Thread-safe, in-memory keyed collection of authors."""

    def __init__(self, seed: Iterable[dict[str, Any]] = DEFAULT_SEED) -> None:
        self._seed = tuple(Author(**row) for row in seed)
        self._lock = threading.RLock()
        self._records: dict[int, Author] = {}
        self._next_id = 1
        self.reset()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"AuthorStore(size={len(self._records)}, next_id={self._next_id})"

    def get_all(self) -> list[Author]:
        """Return every author ordered by id."""
        with self._lock:
            return [self._records[key].model_copy() for key in sorted(self._records)]

    def get(self, author_id: int) -> Author | None:
        """Return the author with ``author_id`` or None when absent."""
        with self._lock:
            record = self._records.get(author_id)
            return record.model_copy() if record is not None else None

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def insert(self, name: str, email: str) -> Author:
        """Validate and store a new author under a freshly assigned id."""
        payload = validate_author_fields(name, email)
        with self._lock:
            record = Author(id=self._next_id, name=payload.name, email=payload.email)
            self._records[record.id] = record
            self._next_id += 1
            logger.debug("store.insert", extra={"author_id": record.id, "size": len(self._records)})
            return record.model_copy()

    def update(self, author_id: int, name: str, email: str) -> Author | None:
        """Replace name and email of an existing author.

        Returns:
            The updated author, or None when ``author_id`` is absent.
        """
        payload = validate_author_fields(name, email)
        with self._lock:
            if author_id not in self._records:
                return None
            record = Author(id=author_id, name=payload.name, email=payload.email)
            self._records[author_id] = record
            logger.debug("store.update", extra={"author_id": author_id})
            return record.model_copy()

    def delete(self, author_id: int) -> Author | None:
        """Remove an author and return it, or None when absent."""
        with self._lock:
            record = self._records.pop(author_id, None)
            if record is not None:
                logger.debug("store.delete", extra={"author_id": author_id, "size": len(self._records)})
            return record

    def reset(self) -> bool:
        """Drop every record and restore the seed data."""
        with self._lock:
            self._records = {row.id: row.model_copy() for row in self._seed}
            self._next_id = max(self._records, default=0) + 1
            logger.debug("store.reset", extra={"size": len(self._records)})
            return True
