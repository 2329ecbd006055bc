"""Application factory for the message board API.

Builds the FastAPI app with its owned collaborators (store engine, rate
limiter, services), middleware, exception handlers and routers. Tests build
isolated apps by passing their own Settings.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from message_board.adapters.rate_limit.base import AbstractRateLimiter
from message_board.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from message_board.api.graphql.schema import create_graphql_router
from message_board.api.routes import health_router
from message_board.core.config import Settings, settings as default_settings
from message_board.core.exception_handlers import setup_exception_handlers
from message_board.core.logging import configure_logging
from message_board.core.middleware import request_id_middleware
from message_board.db.session import create_engine, create_session_maker, init_db
from message_board.services.message_service import MessageService
from message_board.services.user_service import UserService

logger = logging.getLogger(__name__)


async def sweep_rate_limiter(
    limiter: AbstractRateLimiter,
    stop_event: asyncio.Event,
    interval_seconds: float,
) -> None:
    """Periodically drop rate limit entries of users who stopped posting."""
    while not stop_event.is_set():
        removed = limiter.sweep()
        if removed:
            logger.info("rate_limit.sweep", extra={"removed_keys": removed})

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
        except asyncio.TimeoutError:
            continue


def create_app(
    app_settings: Settings | None = None,
    *,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to build from; the global settings if omitted.
        rate_limiter: Optional limiter to inject (e.g. with a fake clock).

    Returns:
        Configured FastAPI app. Tables are created and the sweep task is
        started by the lifespan handler.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    engine = create_engine(cfg.db)
    session_maker = create_session_maker(engine)
    # An injected limiter may be empty, which makes it falsy
    limiter = rate_limiter
    if limiter is None:
        limiter = InMemorySlidingWindowRateLimiter(
            limit=cfg.app.rate_limit_requests,
            window_seconds=cfg.app.rate_limit_window_seconds,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await init_db(engine)

        stop_event = asyncio.Event()
        sweep_task = None
        if cfg.app.rate_limit_sweep_interval_seconds > 0:
            sweep_task = asyncio.create_task(
                sweep_rate_limiter(limiter, stop_event, cfg.app.rate_limit_sweep_interval_seconds)
            )

        logger.info("app.started", extra={"env": cfg.app_env, "port": cfg.app.port})
        yield

        stop_event.set()
        if sweep_task is not None:
            sweep_task.cancel()
            with suppress(asyncio.CancelledError):
                await sweep_task
        await engine.dispose()
        logger.info("app.stopped")

    app = FastAPI(
        title="Message Board API",
        description=(
            "GraphQL API for a message board: users, messages with "
            "previous/next linkage, and per-user posting rate limits."
        ),
        version="0.1.0",
        debug=cfg.app.debug,
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.engine = engine
    app.state.rate_limiter = limiter
    app.state.user_service = UserService(session_maker)
    app.state.message_service = MessageService(session_maker, limiter)

    # Middleware
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.app.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    # Routers (GraphQL is served at the root path)
    app.include_router(health_router)
    app.include_router(create_graphql_router(graphql_ide=cfg.app.graphql_ide))

    return app
