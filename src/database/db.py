"""Database connection and utilities."""

import logging
from pathlib import Path
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.database.models import Base
from src.utils.config import settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on FK enforcement so song_details rows cascade on delete."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, echo: bool = False, **engine_kwargs) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    SQLite connections get foreign keys enabled; PostgreSQL enforces them
    natively.
    """
    new_engine = create_async_engine(database_url, echo=echo, future=True, **engine_kwargs)
    if new_engine.dialect.name == "sqlite":
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# Create async engine
engine = create_engine(settings.database_url, echo=settings.database_echo)

# Create async session factory
AsyncSessionLocal = create_session_factory(engine)


def _ensure_sqlite_directory(bind: AsyncEngine) -> None:
    url = make_url(str(bind.url))
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).resolve().parent.mkdir(parents=True, exist_ok=True)


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables."""
    bind = bind or engine
    _ensure_sqlite_directory(bind)
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready (%s)", bind.url.render_as_string(hide_password=True))


async def get_session() -> AsyncIterator[AsyncSession]:
    """Get async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def close_db(bind: Optional[AsyncEngine] = None) -> None:
    """Close database connections."""
    await (bind or engine).dispose()
