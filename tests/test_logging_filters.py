"""Tests for personal data redaction in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

from message_board.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
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


def test_email_and_body_are_redacted():
    logger, stream = _capture("test_redaction")

    logger.info(
        "user.created",
        extra={
            "email": "jane.doe@example.com",
            "body": "my secret diary",
            "user_id": "u-1",
        },
    )

    output = json.loads(stream.getvalue())
    assert output["email"] == "[REDACTED]"
    assert output["body"] == "[REDACTED]"
    assert output["user_id"] == "u-1"
    assert output["message"] == "user.created"
    assert output["level"] == "info"


def test_nested_sensitive_fields_are_redacted():
    logger, stream = _capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {"Authorization": "Bearer abc", "user-agent": "pytest"},
            "users": [{"email": "a@example.com", "user_name": "A"}],
        },
    )

    output = stream.getvalue()
    assert "Bearer abc" not in output
    assert "a@example.com" not in output
    assert "pytest" in output
    assert "\"A\"" in output


def test_safe_fields_pass_through():
    logger, stream = _capture("test_safe_fields")

    logger.info(
        "message.posted",
        extra={"user_id": "u-1", "message_id": "m-1", "remaining": 9},
    )

    output = stream.getvalue()
    assert "[REDACTED]" not in output
    assert "m-1" in output
    assert "9" in output


def test_request_id_is_attached_from_context():
    logger, stream = _capture("test_request_id")

    set_request_id("req-42")
    try:
        logger.info("with_request")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-42"
