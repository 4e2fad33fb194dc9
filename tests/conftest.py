"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment defaults are set before any import that might load settings.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Set default env vars that all tests might need
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from authors_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter  # noqa: E402
from authors_api.core.app_factory import create_app  # noqa: E402
from authors_api.services.author_store import AuthorStore  # noqa: E402


@pytest.fixture
def store() -> AuthorStore:
    """Fresh store seeded with the two default authors."""
    return AuthorStore()


@pytest.fixture
def limiter() -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter()


@pytest.fixture
def client(store: AuthorStore, limiter: InMemoryFixedWindowRateLimiter) -> TestClient:
    """Test client over an app owning the ``store`` and ``limiter`` fixtures."""
    return TestClient(create_app(store=store, rate_limiter=limiter))


@pytest.fixture
def valid_api_key_headers() -> dict[str, str]:
    """Create valid API key headers for authenticated requests."""
    return {"X-API-Key": "test-api-key-123"}
