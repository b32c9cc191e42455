"""
Archive Screen Schemas.

State, intents and effects of the archived notes screen.
"""

from pydantic import Field

from notekeeper.schemas.base import Intent, ScreenState
from notekeeper.schemas.effects import ShowError, ShowMessage
from notekeeper.schemas.note import Note


class ArchiveState(ScreenState):
    archived_notes: tuple[Note, ...] = ()
    is_loading: bool = False
    error: str | None = None


class ArchiveIntent(Intent):
    """Base for archive screen intents."""


class LoadArchivedNotes(ArchiveIntent):
    pass


class RestoreNote(ArchiveIntent):
    note_id: str = Field(min_length=1)


class DeleteNote(ArchiveIntent):
    note_id: str = Field(min_length=1)


ArchiveEffect = ShowError | ShowMessage
