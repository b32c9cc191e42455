"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Integration tests use a throwaway SQLite file under tmp_path, so every
    test starts from an empty store and sessions get their own connections
    like they do in production. Tests that want the single-connection
    in-memory store build it through NotesContainer.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from notekeeper.core.database import create_engine, create_session_factory, create_tables
from notekeeper.schemas.note import Note


# =============================================================================
# Deterministic Clock and Ids
# =============================================================================


class ManualClock:
    """
    Clock returning a fixed epoch-millisecond value until moved.

    Usage:
        clock = ManualClock(1_000)
        clock.advance(5)
        assert clock() == 1_005
    """

    def __init__(self, now: int = 1_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int = 1) -> int:
        self.now += millis
        return self.now


class SequentialIds:
    """Id factory yielding note-1, note-2, ..."""

    def __init__(self, prefix: str = "note") -> None:
        self.prefix = prefix
        self.issued = 0

    def __call__(self) -> str:
        self.issued += 1
        return f"{self.prefix}-{self.issued}"


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at 1000 ms."""
    return ManualClock()


@pytest.fixture
def id_factory() -> SequentialIds:
    """Predictable note ids."""
    return SequentialIds()


# =============================================================================
# Note Factory
# =============================================================================


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Build Note values with sensible defaults.

    Usage:
        def test_something(make_note):
            note = make_note("n1", title="Groceries", is_pinned=True)
    """

    def _make(
        id: str = "note-1",
        title: str = "Title",
        content: str = "Content",
        created_at: int = 100,
        updated_at: int | None = None,
        **flags: Any,
    ) -> Note:
        return Note(
            id=id,
            title=title,
            content=content,
            created_at=created_at,
            updated_at=created_at if updated_at is None else updated_at,
            **flags,
        )

    return _make


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url(directory: Path) -> str:
    """SQLite file URL inside `directory`."""
    return f"sqlite+aiosqlite:///{directory / 'notes.db'}"


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a test engine over a fresh SQLite file with the schema in place.

    Scope is function so no test sees another test's notes.
    """
    engine = create_engine(get_test_database_url(tmp_path))
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)
