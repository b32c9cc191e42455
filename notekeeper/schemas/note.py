"""
Note Schema.

The immutable note value passed between repository, use cases and
controllers. Changes are made by replacement (`model_copy(update=...)`),
never by mutation.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Note(BaseModel):
    """A single persisted note."""

    id: str = Field(min_length=1, description="Note unique identifier")
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note body text")
    created_at: int = Field(description="Creation time, epoch milliseconds")
    updated_at: int = Field(description="Last mutation time, epoch milliseconds")
    is_pinned: bool = Field(default=False, description="Pinned to the top of the list")
    is_archived: bool = Field(default=False, description="Moved to the archive")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Note":
        if self.created_at > self.updated_at:
            raise ValueError("created_at must not be later than updated_at")
        return self
