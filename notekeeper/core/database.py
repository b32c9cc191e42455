"""
Database Configuration.

SQLAlchemy async engine and session factory for the local notes store.
Engines are created explicitly by the composition root; nothing here is
cached at module level.
"""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from notekeeper.core.logging import get_logger
from notekeeper.models.base import Base

logger = get_logger(__name__)


def _enable_sqlite_wal(dbapi_connection: Any, connection_record: Any) -> None:
    """Use WAL journaling so live queries can read while a write commits."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine for the given URL.

    In-memory SQLite shares a single connection (StaticPool) so every
    session sees the same database.

    Args:
        url: SQLAlchemy async URL (e.g. sqlite+aiosqlite:///notes.db)
        echo: Whether to log emitted SQL

    Returns:
        Configured AsyncEngine
    """
    if url.startswith("sqlite") and ":memory:" in url:
        engine = create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    elif url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_wal)
    else:
        engine = create_async_engine(url, echo=echo, pool_pre_ping=True)

    logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def is_single_connection(engine: AsyncEngine) -> bool:
    """True if every session shares one connection, as in-memory SQLite does."""
    return isinstance(engine.pool, StaticPool)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table known to the declarative base, if missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")

