"""
Note Model.

Database model for the notes table.

Flags are stored as small integers (0/1) and timestamps as integer epoch
milliseconds. Conversion to the `Note` value type happens in the
repository, never here.
"""

from sqlalchemy import BigInteger, Index, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.models.base import Base


class NoteRecord(Base):
    """
    Note database row.

    `id` is assigned by the caller at creation and never reassigned.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_flags_updated", "is_archived", "is_pinned", "updated_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    is_pinned: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    is_archived: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, title={self.title!r})>"
