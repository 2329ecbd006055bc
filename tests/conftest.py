"""Pytest configuration and fixtures shared across all test modules.

APP_ENV is set before any import of the settings module so that no local
.env.development file leaks into the tests.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from pathlib import Path
from typing import Any, Callable

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from message_board.core.app_factory import create_app
from message_board.core.config import AppSettings, DatabaseSettings, Settings
from message_board.db.session import create_engine, create_session_maker, init_db


def _sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file, sweep task disabled."""
    return Settings(
        app=AppSettings(rate_limit_sweep_interval_seconds=0),
        db=DatabaseSettings(url=_sqlite_url(tmp_path / "message_board.sqlite")),
    )


@pytest.fixture
def client(test_settings: Settings):
    """TestClient over a fresh app; the context manager runs the lifespan."""
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client


@pytest.fixture
def graphql(client: TestClient) -> Callable[..., dict[str, Any]]:
    """POST a GraphQL operation to the root endpoint and return the JSON body."""

    def execute(query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables
        response = client.post("/", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return execute


@pytest_asyncio.fixture
async def session_maker(tmp_path: Path):
    """Session factory over an initialized SQLite file."""
    engine = create_engine(DatabaseSettings(url=_sqlite_url(tmp_path / "services.sqlite")))
    await init_db(engine)
    try:
        yield create_session_maker(engine)
    finally:
        await engine.dispose()
