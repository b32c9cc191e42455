"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from notekeeper.repositories.note import NoteRepository


# =============================================================================
# Repository Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_note_repository() -> MagicMock:
    """
    Mock note repository for use case tests.

    Async methods are AsyncMocks through spec=NoteRepository; observe_* methods are
    plain MagicMocks whose return_value a test replaces with a stream.

    Usage:
        async def test_delete(mock_note_repository):
            await DeleteNoteUseCase(mock_note_repository)("n1")
            mock_note_repository.delete.assert_awaited_once_with("n1")
    """
    repo = MagicMock(spec=NoteRepository)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.insert = AsyncMock()
    repo.update = AsyncMock()
    repo.delete = AsyncMock()
    repo.toggle_pin = AsyncMock()
    repo.archive = AsyncMock()
    repo.restore = AsyncMock()
    return repo


# =============================================================================
# Live Query Stubs
# =============================================================================


class StreamStub:
    """
    Callable standing in for a live-query use case.

    Every call opens a new subscription that first yields the latest
    pushed value (if any) and then whatever the test pushes. Pushing an
    exception makes every open subscription raise it.

    Usage:
        notes = StreamStub([note])
        notes.push([note, other])
        notes.fail(DatabaseError("Database operation failed: observe_all"))
    """

    def __init__(self, *initial: Any) -> None:
        self.calls = 0
        self.closed = 0
        self._latest = list(initial)
        self._queues: list[asyncio.Queue[Any]] = []

    def __call__(self) -> AsyncGenerator[Any, None]:
        self.calls += 1
        queue: asyncio.Queue[Any] = asyncio.Queue()
        for value in self._latest:
            queue.put_nowait(value)
        self._queues.append(queue)
        return self._stream(queue)

    async def _stream(self, queue: asyncio.Queue[Any]) -> AsyncGenerator[Any, None]:
        try:
            while True:
                item = await queue.get()
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            self.closed += 1
            self._queues.remove(queue)

    def push(self, value: Any) -> None:
        self._latest = [value]
        for queue in self._queues:
            queue.put_nowait(value)

    def fail(self, exc: Exception) -> None:
        for queue in self._queues:
            queue.put_nowait(exc)

    @property
    def open_subscriptions(self) -> int:
        return len(self._queues)


@pytest.fixture
def stream_stub() -> type[StreamStub]:
    """Provide the StreamStub class for building live-query stand-ins."""
    return StreamStub


# =============================================================================
# Effect Helpers
# =============================================================================


@pytest.fixture
def next_effect():
    """
    Await the next effect of a controller, failing after one second.

    Usage:
        async def test_add(home, next_effect):
            home.dispatch(AddNote())
            assert await next_effect(home) == NavigateToDetails(note_id=None)
    """

    async def _next(controller: Any, timeout: float = 1.0) -> Any:
        return await asyncio.wait_for(controller.effects.receive(), timeout)

    return _next
