"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real SQLite store.
These fixtures build on the root conftest.py database fixtures.
"""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.container import NotesContainer
from notekeeper.core.streams import ChangeNotifier
from notekeeper.repositories.note import NoteRepository


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def note_repository(
    db_session_factory: async_sessionmaker[AsyncSession],
    notifier: ChangeNotifier,
    clock: Any,
) -> NoteRepository:
    """
    Repository over the per-test SQLite file.

    Usage:
        async def test_insert(note_repository, make_note):
            await note_repository.insert(make_note("n1"))
    """
    return NoteRepository(db_session_factory, notifier, clock=clock)


# =============================================================================
# Container Fixtures
# =============================================================================


@pytest.fixture
async def container(clock: Any, id_factory: Any) -> AsyncGenerator[NotesContainer, None]:
    """
    Fully wired container over an in-memory store.

    Usage:
        async def test_flow(container):
            home = container.home_controller()
    """
    notes = await NotesContainer.create(
        database_url="sqlite+aiosqlite:///:memory:",
        effect_buffer_size=16,
        create_schema=True,
        echo=False,
        clock=clock,
        id_factory=id_factory,
    )
    yield notes
    await notes.aclose()


# =============================================================================
# Stream Helpers
# =============================================================================


class LiveReader:
    """
    Reads snapshots from a live query until one matches.

    Usage:
        async with LiveReader(repo.observe_all()) as notes:
            await notes.until(lambda snapshot: len(snapshot) == 1)
    """

    def __init__(self, stream: Any) -> None:
        self._stream = stream
        self.latest: Any = None

    async def __aenter__(self) -> "LiveReader":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self._stream.aclose()

    async def next(self, timeout: float = 1.0) -> Any:
        self.latest = await asyncio.wait_for(anext(self._stream), timeout)
        return self.latest

    async def until(self, predicate: Any, timeout: float = 1.0) -> Any:
        async with asyncio.timeout(timeout):
            while True:
                snapshot = await anext(self._stream)
                self.latest = snapshot
                if predicate(snapshot):
                    return snapshot


@pytest.fixture
def live() -> type[LiveReader]:
    """Provide LiveReader for consuming live queries in tests."""
    return LiveReader
