"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from authors_api.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


@pytest.fixture
def log_capture() -> tuple[logging.Logger, StringIO]:
    """Logger wired to an in-memory stream through the redaction filter."""
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_api_keys(log_capture):
    logger, stream = log_capture

    logger.info(
        "test_event",
        extra={
            "api_key": "sk-secret-123",
            "x-api-key": "another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_author_emails(log_capture):
    logger, stream = log_capture

    logger.info(
        "author_event",
        extra={
            "email": "ada@example.com",
            "note": "contact jac@example.org for details",
            "author_id": 3,
        },
    )

    record = json.loads(stream.getvalue())
    assert record["email"] == "[REDACTED]"
    assert record["note"] == "contact [REDACTED] for details"
    assert record["author_id"] == 3


def test_sensitive_filter_redacts_nested_dicts(log_capture):
    logger, stream = log_capture

    logger.info(
        "nested_event",
        extra={
            "headers": {"x-api-key": "secret-key", "user-agent": "pytest"},
            "payload": {"name": "Ada", "email": "ada@example.com"},
        },
    )

    output = stream.getvalue()
    assert "secret-key" not in output
    assert "ada@example.com" not in output
    assert "pytest" in output
    assert "Ada" in output


def test_safe_fields_pass_through(log_capture):
    logger, stream = log_capture

    logger.info(
        "rate_limit.allowed",
        extra={"quota": "default", "remaining": 199, "path": "/authors"},
    )

    record = json.loads(stream.getvalue())
    assert record["message"] == "rate_limit.allowed"
    assert record["remaining"] == 199
    assert record["path"] == "/authors"
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_is_attached_from_context(log_capture):
    logger, stream = log_capture

    set_request_id("req-123")
    try:
        logger.info("with_request_id")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-123"


def test_only_extra_fields_are_emitted(log_capture):
    logger, stream = log_capture

    logger.info("plain_event", extra={"author_id": 1})

    record = json.loads(stream.getvalue())
    assert set(record) == {"timestamp", "level", "logger", "message", "author_id"}
