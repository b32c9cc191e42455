"""
Base Repository.

Base class for repositories over the local store. Every operation runs in
its own session and transaction, so each call commits or fails atomically.
Committed writes wake the live queries registered on the table.

A store with a single shared connection (in-memory SQLite) must not run
two sessions at once: closing one would roll back the other. Such stores
are given `max_concurrency=1`, which serializes every session.
"""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.core.logging import get_logger
from notekeeper.core.streams import ChangeNotifier, live_query
from notekeeper.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
T = TypeVar("T")


class BaseRepository(Generic[ModelType]):
    """
    Base repository with session handling and live queries.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[NoteRecord]):
            model = NoteRecord
    """

    model: type[ModelType]

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: ChangeNotifier,
        max_concurrency: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.notifier = notifier
        self._gate = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._gate is None:
            async with self.session_factory() as session:
                yield session
            return
        async with self._gate:
            async with self.session_factory() as session:
                yield session

    @property
    def table(self) -> str:
        """Name of the table this repository owns."""
        return self.model.__tablename__

    @asynccontextmanager
    async def _read(self) -> AsyncIterator[AsyncSession]:
        """Session for a point-in-time read."""
        async with self._session() as session:
            yield session

    @asynccontextmanager
    async def _write(self) -> AsyncIterator[AsyncSession]:
        """
        Session for one atomic write.

        Commits on success, rolls back on error. Live queries are only
        notified after the commit; callers that changed nothing should use
        `_write_changed` instead so no spurious snapshot is emitted.
        """
        async with self._session() as session:
            async with session.begin():
                yield session
        self.notifier.notify(self.table)

    async def _write_changed(
        self,
        operation: Callable[[AsyncSession], Awaitable[int]],
    ) -> int:
        """
        Run `operation` in one transaction and notify only if rows changed.

        Args:
            operation: Coroutine function returning the affected row count

        Returns:
            Number of affected rows
        """
        async with self._session() as session:
            async with session.begin():
                affected = await operation(session)
        if affected:
            self.notifier.notify(self.table)
        return affected

    def _observe(self, fetch: Callable[[], Awaitable[T]]) -> AsyncGenerator[T, None]:
        """Live query over this repository's table."""
        return live_query(self.notifier, self.table, fetch)
