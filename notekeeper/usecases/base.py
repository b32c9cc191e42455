"""
Base Use Case.

A use case is one named business action over the note repository. The
base class gives every action an info log line per operation and a single
place where SQLAlchemy failures become ConflictError or DatabaseError, so
controllers only ever see application exceptions.

Usage:
    from notekeeper.usecases.base import BaseUseCase

    class ArchiveNoteUseCase(BaseUseCase):
        async def __call__(self, note_id: str) -> None:
            self._log_operation("Archiving note", note_id=note_id)
            await self._execute_db_operation(
                "archive_note",
                self.repo.archive(note_id),
            )
"""

from collections.abc import AsyncGenerator, Awaitable, Iterator
from contextlib import aclosing, contextmanager
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from notekeeper.core.exceptions import ConflictError, DatabaseError
from notekeeper.core.logging import get_logger
from notekeeper.repositories.note import NoteRepository

T = TypeVar("T")

_UNIQUE_MARKERS = ("unique", "duplicate")


class BaseUseCase:
    """
    Base class for all use cases.

    Subclasses implement `__call__` and route every repository call through
    `_execute_db_operation` (point calls) or `_guard_stream` (live queries).
    """

    def __init__(self, repo: NoteRepository) -> None:
        self.repo = repo
        self._logger = get_logger(self.__class__.__module__)

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """
        Translate storage failures raised inside the block.

        Raises:
            ConflictError: On a unique constraint violation
            DatabaseError: On any other SQLAlchemy error
        """
        try:
            yield
        except IntegrityError as e:
            self._logger.warning(
                "Integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            detail = str(e.orig if e.orig is not None else e).lower()
            if any(marker in detail for marker in _UNIQUE_MARKERS):
                raise ConflictError("Note already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Storage failure",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """Await one repository call, translating storage errors."""
        with self._storage_errors(operation):
            return await coro

    async def _guard_stream(
        self,
        operation: str,
        stream: AsyncGenerator[T, None],
    ) -> AsyncGenerator[T, None]:
        """Re-yield a live query, translating storage errors. Closes `stream` on exit."""
        async with aclosing(stream):
            with self._storage_errors(operation):
                async for value in stream:
                    yield value

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(
            operation,
            extra={"usecase": self.__class__.__name__, **context},
        )
