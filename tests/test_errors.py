"""Tests for the domain error factories."""

import pytest

from message_board.core.errors import (
    DuplicateEmailError,
    NotFoundError,
    RateLimitError,
    duplicate_email,
    rate_limit_exceeded,
    user_not_found,
)


def test_user_not_found_carries_code_and_user():
    error = user_not_found("u-1")

    assert isinstance(error, NotFoundError)
    assert error.message == "User not found."
    assert error.extensions == {"code": "user_not_found"}
    assert error.details["user_id"] == "u-1"


def test_duplicate_email_message():
    error = duplicate_email()

    assert isinstance(error, DuplicateEmailError)
    assert str(error) == "A user with this email already exists."


def test_rate_limit_details():
    error = rate_limit_exceeded("u-1", limit=10, window_seconds=3600, retry_after=120)

    assert isinstance(error, RateLimitError)
    assert error.message == "Rate limit exceeded. You can post a maximum of 10 messages per hour."
    assert error.details == {
        "user_id": "u-1",
        "limit": 10,
        "window_seconds": 3600,
        "retry_after": 120,
    }


@pytest.mark.parametrize(
    ("window_seconds", "expected"),
    [
        (3600, "per hour."),
        (7200, "per 2 hours."),
        (60, "per minute."),
        (300, "per 5 minutes."),
        (45, "per 45 seconds."),
    ],
)
def test_rate_limit_message_follows_window(window_seconds: int, expected: str):
    error = rate_limit_exceeded("u", limit=3, window_seconds=window_seconds, retry_after=None)

    assert error.message.startswith("Rate limit exceeded. You can post a maximum of 3 messages ")
    assert error.message.endswith(expected)
    assert "retry_after" not in error.details
