"""
Composition Root.

Builds the object graph explicitly: engine → repository → use cases →
controller factories. Nothing is looked up globally; views receive
controllers from a container they were handed.

Usage:
    container = await NotesContainer.create()
    home = container.home_controller()
    ...
    await home.close()
    await container.aclose()

    # Or with explicit wiring (tests, embedding):
    container = await NotesContainer.create(
        database_url="sqlite+aiosqlite:///:memory:",
        effect_buffer_size=16,
    )
"""

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from notekeeper.controllers.archive import ArchiveController
from notekeeper.controllers.base import DEFAULT_EFFECT_BUFFER_SIZE
from notekeeper.controllers.details import DetailsController
from notekeeper.controllers.home import HomeController
from notekeeper.core.config import get_app_config, get_database_url
from notekeeper.core.database import (
    create_engine,
    create_session_factory,
    create_tables,
    is_single_connection,
)
from notekeeper.core.logging import get_logger, setup_logging
from notekeeper.core.streams import ChangeNotifier
from notekeeper.core.utils import new_id, now_millis
from notekeeper.repositories.note import NoteRepository
from notekeeper.usecases.note import (
    ArchiveNoteUseCase,
    DeleteNoteUseCase,
    GetArchivedCountUseCase,
    GetArchivedNotesUseCase,
    GetNotesUseCase,
    GetNoteUseCase,
    GetPinnedNotesUseCase,
    RestoreNoteUseCase,
    SaveNoteUseCase,
    TogglePinNoteUseCase,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class NoteUseCases:
    """Every note use case, built over one repository."""

    get_notes: GetNotesUseCase
    get_pinned_notes: GetPinnedNotesUseCase
    get_archived_notes: GetArchivedNotesUseCase
    get_archived_count: GetArchivedCountUseCase
    get_note: GetNoteUseCase
    save_note: SaveNoteUseCase
    delete_note: DeleteNoteUseCase
    toggle_pin_note: TogglePinNoteUseCase
    archive_note: ArchiveNoteUseCase
    restore_note: RestoreNoteUseCase

    @classmethod
    def build(
        cls,
        repo: NoteRepository,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = new_id,
    ) -> "NoteUseCases":
        return cls(
            get_notes=GetNotesUseCase(repo),
            get_pinned_notes=GetPinnedNotesUseCase(repo),
            get_archived_notes=GetArchivedNotesUseCase(repo),
            get_archived_count=GetArchivedCountUseCase(repo),
            get_note=GetNoteUseCase(repo),
            save_note=SaveNoteUseCase(repo, clock=clock, id_factory=id_factory),
            delete_note=DeleteNoteUseCase(repo),
            toggle_pin_note=TogglePinNoteUseCase(repo),
            archive_note=ArchiveNoteUseCase(repo),
            restore_note=RestoreNoteUseCase(repo),
        )


class NotesContainer:
    """
    Owns the engine and hands out screen controllers.

    Controllers are created fresh on every call and belong to the caller,
    who must close them when the screen goes away.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        repository: NoteRepository,
        usecases: NoteUseCases,
        effect_buffer_size: int = DEFAULT_EFFECT_BUFFER_SIZE,
    ) -> None:
        self.engine = engine
        self.repository = repository
        self.usecases = usecases
        self.effect_buffer_size = effect_buffer_size

    @classmethod
    async def create(
        cls,
        database_url: str | None = None,
        effect_buffer_size: int | None = None,
        create_schema: bool | None = None,
        echo: bool | None = None,
        configure_logging: bool = False,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = new_id,
    ) -> "NotesContainer":
        """
        Open the store and wire every component.

        Arguments left as None are read from config/settings/*.yaml
        (and NOTEKEEPER_* environment overrides).
        With `configure_logging` the host application delegates logging
        setup to logging.yaml.
        """
        if database_url is None or effect_buffer_size is None or create_schema is None or echo is None:
            app_config = get_app_config()
            if database_url is None:
                database_url = get_database_url()
            if effect_buffer_size is None:
                effect_buffer_size = app_config.controllers.effect_buffer_size
            if create_schema is None:
                create_schema = app_config.database.create_tables
            if echo is None:
                echo = app_config.database.echo

        if configure_logging:
            setup_logging()

        engine = create_engine(database_url, echo=echo)
        if create_schema:
            await create_tables(engine)

        repository = NoteRepository(
            create_session_factory(engine),
            ChangeNotifier(),
            clock=clock,
            max_concurrency=1 if is_single_connection(engine) else None,
        )
        logger.info("Notes store opened", extra={"dialect": engine.dialect.name})
        return cls(
            engine,
            repository,
            NoteUseCases.build(repository, clock=clock, id_factory=id_factory),
            effect_buffer_size=effect_buffer_size,
        )

    def home_controller(self) -> HomeController:
        u = self.usecases
        return HomeController(
            get_notes=u.get_notes,
            get_pinned_notes=u.get_pinned_notes,
            get_archived_count=u.get_archived_count,
            delete_note=u.delete_note,
            toggle_pin_note=u.toggle_pin_note,
            archive_note=u.archive_note,
            effect_buffer_size=self.effect_buffer_size,
        )

    def details_controller(self, note_id: str | None = None) -> DetailsController:
        u = self.usecases
        return DetailsController(
            get_note=u.get_note,
            save_note=u.save_note,
            archive_note=u.archive_note,
            note_id=note_id,
            effect_buffer_size=self.effect_buffer_size,
        )

    def archive_controller(self) -> ArchiveController:
        u = self.usecases
        return ArchiveController(
            get_archived_notes=u.get_archived_notes,
            restore_note=u.restore_note,
            delete_note=u.delete_note,
            effect_buffer_size=self.effect_buffer_size,
        )

    async def aclose(self) -> None:
        """Dispose the engine. Close controllers first."""
        await self.engine.dispose()
        logger.info("Notes store closed")
