"""Tests for the HTTP fallback exception handler."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from message_board.core.errors import AppError
from message_board.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("disk I/O error")

    return app


def test_unhandled_error_returns_generic_500(app_with_handlers: FastAPI):
    client = TestClient(app_with_handlers, raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "internal_server_error"
    assert "disk" not in error["message"]
    assert "request_id" in error


def test_only_fallback_handler_is_registered(app_with_handlers: FastAPI):
    assert Exception in app_with_handlers.exception_handlers
    assert AppError not in app_with_handlers.exception_handlers


def test_general_exception_handler_never_leaks_details():
    request = AsyncMock()
    request.url.path = "/"
    request.method = "POST"

    response = asyncio.run(general_exception_handler(request, RuntimeError("disk I/O error")))

    data = json.loads(bytes(response.body).decode())
    assert response.status_code == 500
    assert data["error"]["code"] == "internal_server_error"
    assert "disk" not in data["error"]["message"]
    assert "RuntimeError" not in json.dumps(data)
