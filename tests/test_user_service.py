"""Tests for user creation and lookups."""

import asyncio

import pytest

from message_board.core.errors import DuplicateEmailError
from message_board.services.user_service import UserService


@pytest.mark.asyncio
async def test_create_user_persists_and_echoes_input(session_maker) -> None:
    users = UserService(session_maker)

    user = await users.create_user("Jane Doe", "jane.doe@example.com")

    assert isinstance(user.id, str) and user.id
    assert user.name == "Jane Doe"
    assert user.email == "jane.doe@example.com"
    assert user.creation_date.endswith("Z")

    stored = await users.get_user(user.id)
    assert stored is not None
    assert stored.email == "jane.doe@example.com"


@pytest.mark.asyncio
async def test_duplicate_email_is_rejected_without_writing(session_maker) -> None:
    users = UserService(session_maker)
    await users.create_user("Test User", "test@example.com")

    with pytest.raises(DuplicateEmailError) as exc_info:
        await users.create_user("Someone Else", "test@example.com")

    assert exc_info.value.message == "A user with this email already exists."
    assert exc_info.value.code == "duplicate_email"
    assert len(await users.list_users()) == 1


@pytest.mark.asyncio
async def test_concurrent_duplicate_creation_keeps_one_user(session_maker) -> None:
    users = UserService(session_maker)

    results = await asyncio.gather(
        users.create_user("First", "race@example.com"),
        users.create_user("Second", "race@example.com"),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], DuplicateEmailError)
    assert len(await users.list_users()) == 1


@pytest.mark.asyncio
async def test_list_users_in_creation_order(session_maker) -> None:
    users = UserService(session_maker)
    for i in range(5):
        await users.create_user(f"User {i}", f"user{i}@example.com")

    listed = await users.list_users()

    assert [u.name for u in listed] == [f"User {i}" for i in range(5)]


@pytest.mark.asyncio
async def test_unknown_user_lookups(session_maker) -> None:
    users = UserService(session_maker)

    assert await users.get_user("missing") is None
    assert await users.count_messages("missing") == 0
