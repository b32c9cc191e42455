"""
Note Use Cases.

One callable per business action. All of them except SaveNoteUseCase
forward to a single repository method; they exist so each action is an
independently testable unit and a seam for later policy.

Usage:
    save_note = SaveNoteUseCase(repo)
    await save_note(None, title="Groceries", content="milk")

    async for notes in GetNotesUseCase(repo)():
        ...
"""

from collections.abc import AsyncGenerator, Callable

from notekeeper.core.utils import new_id, next_timestamp, now_millis
from notekeeper.repositories.note import NoteRepository
from notekeeper.schemas.note import Note
from notekeeper.usecases.base import BaseUseCase


# =============================================================================
# Queries
# =============================================================================


class GetNotesUseCase(BaseUseCase):
    """Live list of every note."""

    def __call__(self) -> AsyncGenerator[list[Note], None]:
        return self._guard_stream("observe_all", self.repo.observe_all())


class GetPinnedNotesUseCase(BaseUseCase):
    """Live list of pinned, non-archived notes."""

    def __call__(self) -> AsyncGenerator[list[Note], None]:
        return self._guard_stream("observe_pinned", self.repo.observe_pinned())


class GetArchivedNotesUseCase(BaseUseCase):
    """Live list of archived notes."""

    def __call__(self) -> AsyncGenerator[list[Note], None]:
        return self._guard_stream("observe_archived", self.repo.observe_archived())


class GetArchivedCountUseCase(BaseUseCase):
    """Live count of archived notes."""

    def __call__(self) -> AsyncGenerator[int, None]:
        return self._guard_stream(
            "observe_archived_count",
            self.repo.observe_archived_count(),
        )


class GetNoteUseCase(BaseUseCase):
    """Point-in-time lookup of one note."""

    async def __call__(self, note_id: str) -> Note | None:
        return await self._execute_db_operation(
            "get_note",
            self.repo.get_by_id(note_id),
        )


# =============================================================================
# Commands
# =============================================================================


class SaveNoteUseCase(BaseUseCase):
    """
    Create a note, or overwrite an existing one.

    Without an id a new note is created with a fresh id and
    `created_at == updated_at`. With an id the stored note keeps its id and
    `created_at`; title, content and flags are replaced and `updated_at`
    moves strictly forward. If that note no longer exists nothing is
    written: it may have been deleted concurrently.
    """

    def __init__(
        self,
        repo: NoteRepository,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        super().__init__(repo)
        self._clock = clock
        self._id_factory = id_factory

    async def __call__(
        self,
        note_id: str | None,
        title: str,
        content: str,
        is_pinned: bool = False,
        is_archived: bool = False,
    ) -> None:
        now = self._clock()

        if note_id is None:
            note = Note(
                id=self._id_factory(),
                title=title,
                content=content,
                created_at=now,
                updated_at=now,
                is_pinned=is_pinned,
                is_archived=is_archived,
            )
            self._log_operation("Creating note", note_id=note.id)
            await self._execute_db_operation("insert_note", self.repo.insert(note))
            return

        existing = await self._execute_db_operation(
            "get_note",
            self.repo.get_by_id(note_id),
        )
        if existing is None:
            self._logger.info(
                "Save skipped, note no longer exists",
                extra={"note_id": note_id},
            )
            return

        updated = existing.model_copy(
            update={
                "title": title,
                "content": content,
                "is_pinned": is_pinned,
                "is_archived": is_archived,
                "updated_at": next_timestamp(existing.updated_at, now),
            }
        )
        self._log_operation("Updating note", note_id=note_id)
        await self._execute_db_operation("update_note", self.repo.update(updated))


class DeleteNoteUseCase(BaseUseCase):
    """Permanently delete a note."""

    async def __call__(self, note_id: str) -> None:
        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation("delete_note", self.repo.delete(note_id))


class TogglePinNoteUseCase(BaseUseCase):
    """Flip a note's pinned flag."""

    async def __call__(self, note_id: str) -> None:
        self._log_operation("Toggling pin", note_id=note_id)
        await self._execute_db_operation("toggle_pin", self.repo.toggle_pin(note_id))


class ArchiveNoteUseCase(BaseUseCase):
    """Move a note to the archive."""

    async def __call__(self, note_id: str) -> None:
        self._log_operation("Archiving note", note_id=note_id)
        await self._execute_db_operation("archive_note", self.repo.archive(note_id))


class RestoreNoteUseCase(BaseUseCase):
    """Take a note out of the archive."""

    async def __call__(self, note_id: str) -> None:
        self._log_operation("Restoring note", note_id=note_id)
        await self._execute_db_operation("restore_note", self.repo.restore(note_id))
