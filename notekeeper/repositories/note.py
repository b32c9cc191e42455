"""
Note Repository.

Data access layer for notes. Handles all database operations for the
notes table and converts between rows (0/1 flags) and `Note` values.

All `observe_*` methods return live queries: async generators that yield
a fresh snapshot now and after every committed write to the table.
Mutations addressed by id are silent no-ops when the id does not exist.
"""

from collections.abc import AsyncGenerator, Callable

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.core.logging import get_logger, log_with_source
from notekeeper.core.streams import ChangeNotifier
from notekeeper.core.utils import now_millis
from notekeeper.models.note import NoteRecord
from notekeeper.repositories.base import BaseRepository
from notekeeper.schemas.note import Note

logger = get_logger(__name__)


def _to_domain(record: NoteRecord) -> Note:
    return Note(
        id=record.id,
        title=record.title,
        content=record.content,
        created_at=record.created_at,
        updated_at=record.updated_at,
        is_pinned=record.is_pinned == 1,
        is_archived=record.is_archived == 1,
    )


def _flag(value: bool) -> int:
    return 1 if value else 0


class NoteRepository(BaseRepository[NoteRecord]):
    """
    Repository for notes.

    Ordering:
        observe_all      - pinned first, then most recently updated first
        observe_pinned   - most recently updated first
        observe_archived - most recently updated first
    """

    model = NoteRecord

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: ChangeNotifier,
        clock: Callable[[], int] = now_millis,
        max_concurrency: int | None = None,
    ) -> None:
        super().__init__(session_factory, notifier, max_concurrency=max_concurrency)
        self._clock = clock

    # -------------------------------------------------------------------------
    # Live queries
    # -------------------------------------------------------------------------

    def observe_all(self) -> AsyncGenerator[list[Note], None]:
        """All notes, archived included."""
        return self._observe(
            lambda: self._fetch_notes(
                select(NoteRecord).order_by(
                    NoteRecord.is_pinned.desc(),
                    NoteRecord.updated_at.desc(),
                )
            )
        )

    def observe_pinned(self) -> AsyncGenerator[list[Note], None]:
        """Pinned notes that are not archived."""
        return self._observe(
            lambda: self._fetch_notes(
                select(NoteRecord)
                .where(NoteRecord.is_pinned == 1)
                .where(NoteRecord.is_archived == 0)
                .order_by(NoteRecord.updated_at.desc())
            )
        )

    def observe_archived(self) -> AsyncGenerator[list[Note], None]:
        """Archived notes, pinned or not."""
        return self._observe(
            lambda: self._fetch_notes(
                select(NoteRecord)
                .where(NoteRecord.is_archived == 1)
                .order_by(NoteRecord.updated_at.desc())
            )
        )

    def observe_archived_count(self) -> AsyncGenerator[int, None]:
        """Number of archived notes."""
        return self._observe(self._count_archived)

    async def _fetch_notes(self, statement) -> list[Note]:
        async with self._read() as session:
            result = await session.execute(statement)
            return [_to_domain(record) for record in result.scalars().all()]

    async def _count_archived(self) -> int:
        async with self._read() as session:
            result = await session.execute(
                select(func.count())
                .select_from(NoteRecord)
                .where(NoteRecord.is_archived == 1)
            )
            return result.scalar_one()

    # -------------------------------------------------------------------------
    # Point reads
    # -------------------------------------------------------------------------

    async def get_by_id(self, id: str) -> Note | None:
        """Get a note by id, or None if it does not exist. Not reactive."""
        async with self._read() as session:
            record = await session.get(NoteRecord, id)
            return _to_domain(record) if record is not None else None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def insert(self, note: Note) -> None:
        """
        Insert a new note.

        Raises:
            IntegrityError: If a note with the same id already exists
        """
        async with self._write() as session:
            session.add(
                NoteRecord(
                    id=note.id,
                    title=note.title,
                    content=note.content,
                    created_at=note.created_at,
                    updated_at=note.updated_at,
                    is_pinned=_flag(note.is_pinned),
                    is_archived=_flag(note.is_archived),
                )
            )
        log_with_source(logger, "repository", "debug", "Note inserted", note_id=note.id)

    async def update(self, note: Note) -> None:
        """Replace every mutable field of an existing note. `created_at` is kept."""
        affected = await self._write_changed(
            lambda session: self._execute_update(
                session,
                note.id,
                title=note.title,
                content=note.content,
                updated_at=note.updated_at,
                is_pinned=_flag(note.is_pinned),
                is_archived=_flag(note.is_archived),
            )
        )
        log_with_source(
            logger, "repository", "debug", "Note updated",
            note_id=note.id, affected=affected,
        )

    async def delete(self, id: str) -> None:
        """Permanently delete a note."""

        async def _delete(session: AsyncSession) -> int:
            result = await session.execute(
                delete(NoteRecord)
                .where(NoteRecord.id == id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0

        affected = await self._write_changed(_delete)
        log_with_source(
            logger, "repository", "debug", "Note deleted",
            note_id=id, affected=affected,
        )

    async def toggle_pin(self, id: str) -> None:
        """Flip the pinned flag and bump `updated_at`."""
        await self._touch(id, "toggle_pin", is_pinned=1 - NoteRecord.is_pinned)

    async def archive(self, id: str) -> None:
        """Move a note to the archive and bump `updated_at`."""
        await self._touch(id, "archive", is_archived=1)

    async def restore(self, id: str) -> None:
        """Take a note out of the archive and bump `updated_at`."""
        await self._touch(id, "restore", is_archived=0)

    async def _touch(self, id: str, operation: str, **values) -> None:
        """Targeted flag update that also bumps `updated_at` monotonically."""
        now = self._clock()
        bumped = case(
            (NoteRecord.updated_at < now, now),
            else_=NoteRecord.updated_at + 1,
        )
        affected = await self._write_changed(
            lambda session: self._execute_update(session, id, updated_at=bumped, **values)
        )
        log_with_source(
            logger, "repository", "debug", "Note flags updated",
            note_id=id, operation=operation, affected=affected,
        )

    async def _execute_update(self, session: AsyncSession, id: str, **values) -> int:
        result = await session.execute(
            update(NoteRecord)
            .where(NoteRecord.id == id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
