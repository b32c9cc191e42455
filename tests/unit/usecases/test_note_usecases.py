"""
Unit Tests for Note Use Cases.

Tests each use case against a mocked repository.
"""

import pytest
from sqlalchemy.exc import OperationalError

from notekeeper.core.exceptions import DatabaseError
from notekeeper.usecases.note import (
    ArchiveNoteUseCase,
    DeleteNoteUseCase,
    GetArchivedCountUseCase,
    GetArchivedNotesUseCase,
    GetNotesUseCase,
    GetNoteUseCase,
    GetPinnedNotesUseCase,
    RestoreNoteUseCase,
    SaveNoteUseCase,
    TogglePinNoteUseCase,
)


async def _snapshots(*values):
    for value in values:
        yield value


class TestSaveNoteCreate:
    """Tests for saving a note without an id."""

    @pytest.fixture
    def usecase(self, mock_note_repository, clock, id_factory):
        return SaveNoteUseCase(mock_note_repository, clock=clock, id_factory=id_factory)

    async def test_creates_note_with_fresh_id(self, usecase, mock_note_repository):
        await usecase(None, title="Groceries", content="milk")

        mock_note_repository.insert.assert_awaited_once()
        note = mock_note_repository.insert.await_args.args[0]
        assert note.id == "note-1"
        assert note.title == "Groceries"
        assert note.content == "milk"

    async def test_created_at_equals_updated_at(self, usecase, mock_note_repository):
        await usecase(None, title="A", content="")

        note = mock_note_repository.insert.await_args.args[0]
        assert note.created_at == note.updated_at == 1_000

    async def test_flags_are_taken_from_draft(self, usecase, mock_note_repository):
        await usecase(None, title="A", content="", is_pinned=True)

        note = mock_note_repository.insert.await_args.args[0]
        assert note.is_pinned is True
        assert note.is_archived is False

    async def test_each_new_note_gets_distinct_id(self, usecase, mock_note_repository):
        await usecase(None, title="A", content="")
        await usecase(None, title="B", content="")

        ids = [call.args[0].id for call in mock_note_repository.insert.await_args_list]
        assert ids == ["note-1", "note-2"]

    async def test_never_reads_before_insert(self, usecase, mock_note_repository):
        await usecase(None, title="A", content="")
        mock_note_repository.get_by_id.assert_not_awaited()


class TestSaveNoteUpdate:
    """Tests for saving a note that already has an id."""

    @pytest.fixture
    def usecase(self, mock_note_repository, clock, id_factory):
        return SaveNoteUseCase(mock_note_repository, clock=clock, id_factory=id_factory)

    async def test_keeps_id_and_created_at(self, usecase, mock_note_repository, make_note):
        mock_note_repository.get_by_id.return_value = make_note(
            "n1", title="Old", created_at=100, updated_at=500
        )

        await usecase("n1", title="New", content="body", is_pinned=True)

        updated = mock_note_repository.update.await_args.args[0]
        assert updated.id == "n1"
        assert updated.created_at == 100
        assert updated.title == "New"
        assert updated.content == "body"
        assert updated.is_pinned is True
        assert updated.updated_at == 1_000
        mock_note_repository.insert.assert_not_awaited()

    async def test_updated_at_strictly_increases_within_same_millisecond(
        self, usecase, mock_note_repository, make_note, clock
    ):
        mock_note_repository.get_by_id.return_value = make_note(
            "n1", created_at=100, updated_at=clock.now
        )

        await usecase("n1", title="Same", content="tick")

        updated = mock_note_repository.update.await_args.args[0]
        assert updated.updated_at == clock.now + 1

    async def test_missing_note_writes_nothing(self, usecase, mock_note_repository):
        mock_note_repository.get_by_id.return_value = None

        await usecase("gone", title="A", content="B")

        mock_note_repository.update.assert_not_awaited()
        mock_note_repository.insert.assert_not_awaited()

    async def test_storage_failure_becomes_database_error(self, usecase, mock_note_repository):
        mock_note_repository.get_by_id.side_effect = OperationalError(
            "SELECT", {}, Exception("database is locked")
        )

        with pytest.raises(DatabaseError, match="get_note"):
            await usecase("n1", title="A", content="B")


class TestForwardingCommands:
    """Tests for the single-call command use cases."""

    @pytest.mark.parametrize(
        ("usecase_cls", "method"),
        [
            (DeleteNoteUseCase, "delete"),
            (TogglePinNoteUseCase, "toggle_pin"),
            (ArchiveNoteUseCase, "archive"),
            (RestoreNoteUseCase, "restore"),
        ],
    )
    async def test_forwards_id_to_repository(self, mock_note_repository, usecase_cls, method):
        await usecase_cls(mock_note_repository)("n1")

        getattr(mock_note_repository, method).assert_awaited_once_with("n1")

    async def test_delete_failure_becomes_database_error(self, mock_note_repository):
        mock_note_repository.delete.side_effect = OperationalError(
            "DELETE", {}, Exception("disk I/O error")
        )

        with pytest.raises(DatabaseError, match="Database operation failed: delete_note"):
            await DeleteNoteUseCase(mock_note_repository)("n1")


class TestQueries:
    """Tests for the query use cases."""

    async def test_get_note_returns_repository_value(self, mock_note_repository, make_note):
        note = make_note("n1")
        mock_note_repository.get_by_id.return_value = note

        assert await GetNoteUseCase(mock_note_repository)("n1") == note
        mock_note_repository.get_by_id.assert_awaited_once_with("n1")

    async def test_get_note_missing_returns_none(self, mock_note_repository):
        assert await GetNoteUseCase(mock_note_repository)("missing") is None

    @pytest.mark.parametrize(
        ("usecase_cls", "method"),
        [
            (GetNotesUseCase, "observe_all"),
            (GetPinnedNotesUseCase, "observe_pinned"),
            (GetArchivedNotesUseCase, "observe_archived"),
        ],
    )
    async def test_list_streams_relay_repository_snapshots(
        self, mock_note_repository, make_note, usecase_cls, method
    ):
        first, second = [make_note("a")], [make_note("a"), make_note("b")]
        getattr(mock_note_repository, method).return_value = _snapshots(first, second)

        snapshots = [notes async for notes in usecase_cls(mock_note_repository)()]

        assert snapshots == [first, second]

    async def test_archived_count_stream(self, mock_note_repository):
        mock_note_repository.observe_archived_count.return_value = _snapshots(0, 1, 2)

        counts = [count async for count in GetArchivedCountUseCase(mock_note_repository)()]

        assert counts == [0, 1, 2]
