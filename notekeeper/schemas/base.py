"""
Base Schemas.

Common bases for screen states, intents and effects. All of them are
frozen pydantic models: a new snapshot replaces the old one, nothing is
modified in place.
"""

from pydantic import BaseModel, ConfigDict


class ScreenState(BaseModel):
    """Latest immutable snapshot a view renders from."""

    model_config = ConfigDict(frozen=True)


class Intent(BaseModel):
    """A view-originated request to change state or trigger an action."""

    model_config = ConfigDict(frozen=True)


class Effect(BaseModel):
    """A one-shot instruction to the view. Never part of state."""

    model_config = ConfigDict(frozen=True)
