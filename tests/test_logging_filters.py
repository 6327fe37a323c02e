"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.logging import JsonFormatter, SensitiveDataFilter, clear_request_id, redact, set_request_id


@pytest.fixture
def capture():
    """Logger wired like production: redaction filter plus JSON formatter."""

    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()


def test_sensitive_filter_redacts_credentials(capture):
    logger, stream = capture

    logger.info(
        "mail.relay_login",
        extra={
            "password": "smtp-secret-123",
            "smtp_password": "another-secret",
            "smtp_host": "smtp.example.com",
        },
    )

    output = stream.getvalue()
    assert "smtp-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "smtp.example.com" in output


def test_sensitive_filter_redacts_submitted_content(capture):
    logger, stream = capture

    logger.info(
        "contact.debug",
        extra={
            "contact_name": "Jane Visitor",
            "contact_email": "jane@example.com",
            "contact_message": "Please call me at 555-0100",
            "message_chars": 26,
        },
    )

    output = stream.getvalue()
    assert "Jane Visitor" not in output
    assert "jane@example.com" not in output
    assert "555-0100" not in output
    assert "message_chars" in output


def test_sensitive_filter_allows_safe_fields(capture):
    logger, stream = capture

    logger.info(
        "http.request",
        extra={
            "request_id": "req-123",
            "path": "/send",
            "status": 200,
            "duration_ms": 15.5,
        },
    )

    record = json.loads(stream.getvalue())
    assert record["request_id"] == "req-123"
    assert record["path"] == "/send"
    assert record["status"] == 200
    assert record["message"] == "http.request"
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {"authorization": "Basic abc", "user-agent": "pytest"},
            "mails": [{"reply_to": "visitor@example.com", "subject": "hello"}],
        },
    )

    output = stream.getvalue()
    assert "Basic abc" not in output
    assert "visitor@example.com" not in output
    assert "pytest" in output
    assert "hello" in output


def test_request_id_from_context_is_included(capture):
    logger, stream = capture

    set_request_id("ctx-req-42")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "ctx-req-42"


def test_redact_preserves_sequence_types():
    value = {"items": ({"password": "x"}, "plain")}

    assert redact(value) == {"items": ({"password": "[REDACTED]"}, "plain")}
