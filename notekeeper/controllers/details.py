"""
Details Controller.

State owner for the single-note editor. The state is a local draft:
title, content and pin edits touch nothing until SaveNote, which
validates the draft and hands it to the save use case.
"""

from notekeeper.controllers.base import (
    DEFAULT_EFFECT_BUFFER_SIZE,
    BaseController,
    error_message,
)
from notekeeper.core.exceptions import ValidationError
from notekeeper.schemas.details import (
    ArchiveNote,
    DetailsEffect,
    DetailsIntent,
    DetailsState,
    LoadNote,
    SaveNote,
    TogglePin,
    UpdateContent,
    UpdateTitle,
)
from notekeeper.schemas.effects import NavigateBack, ShowError
from notekeeper.usecases.note import (
    ArchiveNoteUseCase,
    GetNoteUseCase,
    SaveNoteUseCase,
)

EMPTY_NOTE_MESSAGE = "Title and content cannot be empty"


def validate_draft(state: DetailsState) -> None:
    """
    Reject a draft with nothing worth saving.

    Raises:
        ValidationError: If both title and content are blank
    """
    if not state.title.strip() and not state.content.strip():
        raise ValidationError(
            EMPTY_NOTE_MESSAGE,
            details={"fields": ["title", "content"]},
        )


class DetailsController(BaseController[DetailsState, DetailsIntent, DetailsEffect]):
    """
    Controller for creating or editing one note.

    With `note_id` the stored note is loaded right away; without it the
    editor starts on an empty draft for a new note.
    """

    def __init__(
        self,
        get_note: GetNoteUseCase,
        save_note: SaveNoteUseCase,
        archive_note: ArchiveNoteUseCase,
        note_id: str | None = None,
        effect_buffer_size: int = DEFAULT_EFFECT_BUFFER_SIZE,
    ) -> None:
        super().__init__(DetailsState(note_id=note_id), effect_buffer_size)
        self._get_note = get_note
        self._save_note = save_note
        self._archive_note = archive_note
        if note_id is not None:
            self._launch(self._load_note(note_id), name="LoadNote")

    async def _handle(self, intent: DetailsIntent) -> None:
        if isinstance(intent, LoadNote):
            await self._load_note(intent.note_id)
        elif isinstance(intent, UpdateTitle):
            self._state.update(title=intent.title)
        elif isinstance(intent, UpdateContent):
            self._state.update(content=intent.content)
        elif isinstance(intent, TogglePin):
            self._state.update(is_pinned=not self._state.value.is_pinned)
        elif isinstance(intent, SaveNote):
            await self._save()
        elif isinstance(intent, ArchiveNote):
            await self._archive()
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")

    async def _load_note(self, note_id: str | None) -> None:
        if note_id is None:
            return

        try:
            note = await self._get_note(note_id)
        except Exception as exc:
            self._logger.warning(
                "Note lookup failed",
                extra={"note_id": note_id, "error": str(exc)},
            )
            self._emit(ShowError(message=error_message(exc, "Failed to load note")))
            return

        if note is None:
            # Deleted elsewhere: keep the id so a save stays a no-op.
            return

        self._state.update(
            note_id=note.id,
            title=note.title,
            content=note.content,
            is_pinned=note.is_pinned,
            is_archived=note.is_archived,
        )

    async def _save(self) -> None:
        draft = self._state.value
        try:
            validate_draft(draft)
        except ValidationError as exc:
            self._emit(ShowError(message=exc.message))
            return

        self._state.update(is_saving=True)
        saved = await self._attempt(
            "save_note",
            self._save_note(
                draft.note_id,
                title=draft.title,
                content=draft.content,
                is_pinned=draft.is_pinned,
                is_archived=draft.is_archived,
            ),
            "Failed to save note",
        )
        self._state.update(is_saving=False)
        if saved:
            self._emit(NavigateBack())

    async def _archive(self) -> None:
        note_id = self._state.value.note_id
        if note_id is None:
            return
        if await self._attempt("archive_note", self._archive_note(note_id), "Failed to archive note"):
            self._emit(NavigateBack())
