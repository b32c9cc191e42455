"""
Details Screen Schemas.

State, intents and effects of the single-note editor. The state is a
draft: nothing reaches storage until SaveNote.
"""

from notekeeper.schemas.base import Intent, ScreenState
from notekeeper.schemas.effects import NavigateBack, ShowError


class DetailsState(ScreenState):
    note_id: str | None = None
    title: str = ""
    content: str = ""
    is_pinned: bool = False
    is_archived: bool = False
    is_saving: bool = False


class DetailsIntent(Intent):
    """Base for details screen intents."""


class LoadNote(DetailsIntent):
    note_id: str | None = None


class UpdateTitle(DetailsIntent):
    title: str


class UpdateContent(DetailsIntent):
    content: str


class SaveNote(DetailsIntent):
    pass


class ArchiveNote(DetailsIntent):
    pass


class TogglePin(DetailsIntent):
    pass


DetailsEffect = NavigateBack | ShowError
