"""API Key authentication logic.

Protected Authors actions (replace, patch, delete) require a valid API key.
Keys are validated against a comma-separated list from environment variables.

Design principles:
- Single Responsibility: Only handles API key validation
- Dependency Injection: Used via FastAPI Depends() for loose coupling
- Configuration-driven: Keys managed via env vars, not hardcoded
- Testable: Pure function logic with minimal dependencies
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Header

from authors_api.core.config import settings
from authors_api.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def hash_api_key(api_key: str) -> str:
    """Short, non-reversible fingerprint of an API key for logs."""
    return hashlib.sha256(api_key.encode()).hexdigest()[:16]


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Args:
        keys_string: Comma-separated string of API keys, or None.

    Returns:
        Set of trimmed, non-empty API keys.

    Examples:
        >>> parse_api_keys("key1,key2,key3")
        {'key1', 'key2', 'key3'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    return {key.strip() for key in keys_string.split(",") if key.strip()}


def is_valid_api_key(provided_key: str | None) -> bool:
    """Whether ``provided_key`` is one of the configured keys."""
    if not provided_key:
        return False
    return provided_key in parse_api_keys(settings.app.api_keys)


def validate_api_key(provided_key: str) -> None:
    """Validate that provided API key matches configured keys.

    Pure validation logic without FastAPI dependencies for easy testing.

    Args:
        provided_key: API key to validate.

    Raises:
        AuthenticationAppError: If key is invalid or authentication is required
            but no keys are configured.
    """
    if not settings.app.api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.api_keys)

    if not valid_keys:
        logger.error(
            "api_key_validation_failed",
            extra={
                "reason": "api_keys_not_configured",
                "auth_required": settings.app.api_key_required,
            },
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    if provided_key not in valid_keys:
        logger.warning(
            "api_key_validation_failed",
            extra={
                "reason": "invalid_api_key",
                "api_key_hash": hash_api_key(provided_key),
                "auth_required": settings.app.api_key_required,
            },
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency guarding protected endpoints.

    Usage:
        @router.put("/authors/{author_id}", dependencies=[Depends(verify_api_key)])

    Args:
        x_api_key: API key from X-API-Key header (injected by FastAPI).

    Raises:
        AuthenticationAppError: Rendered as 403 Forbidden by the global handler.
    """
    if not settings.app.api_key_required:
        logger.debug(
            "auth.skipped",
            extra={"reason": "auth_required_false"},
        )
        return

    if not x_api_key:
        logger.warning(
            "auth.missing_key",
            extra={
                "auth_required": True,
                "api_key_present": False,
            },
        )
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    validate_api_key(x_api_key)
    logger.info(
        "auth.success",
        extra={
            "auth_required": True,
            "api_key_present": True,
            "api_key_hash": hash_api_key(x_api_key),
        },
    )
