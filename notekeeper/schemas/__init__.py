# Pydantic schemas package
from notekeeper.schemas.base import Effect, Intent, ScreenState
from notekeeper.schemas.effects import (
    NavigateBack,
    NavigateToArchive,
    NavigateToDetails,
    ShowError,
    ShowMessage,
)
from notekeeper.schemas.note import Note

__all__ = [
    "Effect",
    "Intent",
    "NavigateBack",
    "NavigateToArchive",
    "NavigateToDetails",
    "Note",
    "ScreenState",
    "ShowError",
    "ShowMessage",
]
