"""
Home Screen Schemas.

State, intents and effects of the note list screen.
"""

from pydantic import Field

from notekeeper.schemas.base import Intent, ScreenState
from notekeeper.schemas.effects import NavigateToArchive as NavigateToArchiveEffect
from notekeeper.schemas.effects import NavigateToDetails, ShowError
from notekeeper.schemas.note import Note


class HomeState(ScreenState):
    pinned_notes: tuple[Note, ...] = ()
    normal_notes: tuple[Note, ...] = ()
    archived_count: int = 0
    is_loading: bool = False
    error: str | None = None


class HomeIntent(Intent):
    """Base for list screen intents."""


class LoadNotes(HomeIntent):
    pass


class AddNote(HomeIntent):
    pass


class EditNote(HomeIntent):
    note_id: str = Field(min_length=1)


class DeleteNote(HomeIntent):
    note_id: str = Field(min_length=1)


class TogglePin(HomeIntent):
    note_id: str = Field(min_length=1)


class ArchiveNote(HomeIntent):
    note_id: str = Field(min_length=1)


class NavigateToArchive(HomeIntent):
    pass


HomeEffect = NavigateToDetails | NavigateToArchiveEffect | ShowError
