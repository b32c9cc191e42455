"""
Archive Controller.

State owner for the archived notes screen: one live query plus restore
and delete actions, each confirmed with a ShowMessage effect.
"""

from notekeeper.controllers.base import (
    DEFAULT_EFFECT_BUFFER_SIZE,
    BaseController,
    error_message,
)
from notekeeper.schemas.archive import (
    ArchiveEffect,
    ArchiveIntent,
    ArchiveState,
    DeleteNote,
    LoadArchivedNotes,
    RestoreNote,
)
from notekeeper.schemas.effects import ShowError, ShowMessage
from notekeeper.schemas.note import Note
from notekeeper.usecases.note import (
    DeleteNoteUseCase,
    GetArchivedNotesUseCase,
    RestoreNoteUseCase,
)


class ArchiveController(BaseController[ArchiveState, ArchiveIntent, ArchiveEffect]):
    """Controller for the archive screen. Starts loading on creation."""

    def __init__(
        self,
        get_archived_notes: GetArchivedNotesUseCase,
        restore_note: RestoreNoteUseCase,
        delete_note: DeleteNoteUseCase,
        effect_buffer_size: int = DEFAULT_EFFECT_BUFFER_SIZE,
    ) -> None:
        super().__init__(ArchiveState(), effect_buffer_size)
        self._get_archived_notes = get_archived_notes
        self._restore_note = restore_note
        self._delete_note = delete_note
        self._load_archived_notes()

    async def _handle(self, intent: ArchiveIntent) -> None:
        if isinstance(intent, LoadArchivedNotes):
            self._load_archived_notes()
        elif isinstance(intent, RestoreNote):
            if await self._attempt(
                "restore_note",
                self._restore_note(intent.note_id),
                "Failed to restore note",
            ):
                self._emit(ShowMessage(message="Note restored"))
        elif isinstance(intent, DeleteNote):
            if await self._attempt(
                "delete_note",
                self._delete_note(intent.note_id),
                "Failed to delete note",
            ):
                self._emit(ShowMessage(message="Note deleted"))
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")

    def _load_archived_notes(self) -> None:
        self._state.update(is_loading=True)
        self._subscribe(
            self._get_archived_notes(),
            self._on_archived_notes,
            self._on_load_error,
        )

    def _on_archived_notes(self, notes: list[Note]) -> None:
        self._state.update(archived_notes=tuple(notes), is_loading=False, error=None)

    def _on_load_error(self, exc: Exception) -> None:
        self._state.update(is_loading=False, error=error_message(exc, "Unknown error"))
        self._emit(ShowError(message=error_message(exc, "Failed to load archived notes")))
