"""
Effect Schemas.

One-shot instructions delivered to the view through a controller's
effect channel. Each screen emits a subset of these.
"""

from notekeeper.schemas.base import Effect


class NavigateToDetails(Effect):
    """Open the details screen; `note_id=None` starts a new note."""

    note_id: str | None = None


class NavigateToArchive(Effect):
    """Open the archive screen."""


class NavigateBack(Effect):
    """Leave the current screen."""


class ShowError(Effect):
    """Show a dismissible error message."""

    message: str


class ShowMessage(Effect):
    """Show a dismissible informational message."""

    message: str
