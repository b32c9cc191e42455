"""
Home Controller.

State owner for the note list screen. Combines three live queries
(pinned notes, all notes, archived count) into one HomeState, and turns
list actions into use case calls. The list itself is never edited
locally; it changes when the live queries re-emit after a write.
"""

from notekeeper.controllers.base import (
    DEFAULT_EFFECT_BUFFER_SIZE,
    BaseController,
    error_message,
)
from notekeeper.core.streams import combine_latest
from notekeeper.schemas.effects import NavigateToArchive as NavigateToArchiveEffect
from notekeeper.schemas.effects import NavigateToDetails, ShowError
from notekeeper.schemas.home import (
    AddNote,
    ArchiveNote,
    DeleteNote,
    EditNote,
    HomeEffect,
    HomeIntent,
    HomeState,
    LoadNotes,
    NavigateToArchive,
    TogglePin,
)
from notekeeper.schemas.note import Note
from notekeeper.usecases.note import (
    ArchiveNoteUseCase,
    DeleteNoteUseCase,
    GetArchivedCountUseCase,
    GetNotesUseCase,
    GetPinnedNotesUseCase,
    TogglePinNoteUseCase,
)

NotesSnapshot = tuple[list[Note], list[Note], int]


def split_notes(pinned: list[Note], all_notes: list[Note], archived_count: int) -> NotesSnapshot:
    """
    Derive the list sections from the three live queries.

    Normal notes are the non-pinned, non-archived notes; archived notes
    only ever show up through the archive screen and the count.
    """
    normal = [note for note in all_notes if not note.is_pinned and not note.is_archived]
    return pinned, normal, archived_count


class HomeController(BaseController[HomeState, HomeIntent, HomeEffect]):
    """Controller for the note list screen. Starts loading on creation."""

    def __init__(
        self,
        get_notes: GetNotesUseCase,
        get_pinned_notes: GetPinnedNotesUseCase,
        get_archived_count: GetArchivedCountUseCase,
        delete_note: DeleteNoteUseCase,
        toggle_pin_note: TogglePinNoteUseCase,
        archive_note: ArchiveNoteUseCase,
        effect_buffer_size: int = DEFAULT_EFFECT_BUFFER_SIZE,
    ) -> None:
        super().__init__(HomeState(), effect_buffer_size)
        self._get_notes = get_notes
        self._get_pinned_notes = get_pinned_notes
        self._get_archived_count = get_archived_count
        self._delete_note = delete_note
        self._toggle_pin_note = toggle_pin_note
        self._archive_note = archive_note
        self._load_notes()

    async def _handle(self, intent: HomeIntent) -> None:
        if isinstance(intent, LoadNotes):
            self._load_notes()
        elif isinstance(intent, AddNote):
            self._emit(NavigateToDetails(note_id=None))
        elif isinstance(intent, EditNote):
            self._emit(NavigateToDetails(note_id=intent.note_id))
        elif isinstance(intent, DeleteNote):
            await self._attempt(
                "delete_note",
                self._delete_note(intent.note_id),
                "Failed to delete note",
            )
        elif isinstance(intent, TogglePin):
            await self._attempt(
                "toggle_pin",
                self._toggle_pin_note(intent.note_id),
                "Failed to toggle pin",
            )
        elif isinstance(intent, ArchiveNote):
            await self._attempt(
                "archive_note",
                self._archive_note(intent.note_id),
                "Failed to archive note",
            )
        elif isinstance(intent, NavigateToArchive):
            self._emit(NavigateToArchiveEffect())
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")

    def _load_notes(self) -> None:
        self._state.update(is_loading=True)
        self._subscribe(
            combine_latest(
                self._get_pinned_notes(),
                self._get_notes(),
                self._get_archived_count(),
                transform=split_notes,
            ),
            self._on_notes,
            self._on_load_error,
        )

    def _on_notes(self, snapshot: NotesSnapshot) -> None:
        pinned, normal, archived_count = snapshot
        self._state.update(
            pinned_notes=tuple(pinned),
            normal_notes=tuple(normal),
            archived_count=archived_count,
            is_loading=False,
            error=None,
        )

    def _on_load_error(self, exc: Exception) -> None:
        self._state.update(is_loading=False, error=error_message(exc, "Unknown error"))
        self._emit(ShowError(message=error_message(exc, "Failed to load notes")))
