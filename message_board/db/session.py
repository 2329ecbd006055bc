"""Database engine and session management."""

from __future__ import annotations

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from message_board.core.config import DatabaseSettings
from message_board.db.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(db_settings: DatabaseSettings) -> AsyncEngine:
    """Build the async engine for the configured URL.

    Args:
        db_settings: Database URL and echo flag.

    Returns:
        AsyncEngine; SQLite connections get foreign key enforcement.
    """
    engine = create_async_engine(db_settings.url, echo=db_settings.echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the users and messages tables if they do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "database.initialized",
        extra={"dialect": engine.dialect.name, "tables": sorted(Base.metadata.tables)},
    )
