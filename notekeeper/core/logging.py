"""
Centralized Logging.

structlog on top of the standard logging tree, so records from SQLAlchemy
and aiosqlite pass through the same formatters as our own. Settings come
from config/settings/logging.yaml; setup_logging() arguments override them.

Every record carries:
    timestamp, level, logger, event, func_name, lineno
    source      - layer that logged it, passed explicitly (see VALID_SOURCES)
    ...         - anything bound with log_context() in the current task

Usage:
    from notekeeper.core.logging import get_logger, log_context, log_with_source

    setup_logging()                       # once, by the host application
    logger = get_logger(__name__)
    logger.info("Store opened", extra={"dialect": "sqlite"})

    with log_context(controller="HomeController"):
        log_with_source(logger, "controller", "debug", "Intent received")
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from notekeeper.core.config import find_project_root, get_app_config
from notekeeper.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "ui",
    "controller",
    "usecase",
    "repository",
    "storage",
    "internal",
    "unknown",
})
"""Layers a record can come from. Always passed by the caller, never inferred."""

_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


def _shared_processors() -> list[Processor]:
    """Processors applied to structlog and foreign (stdlib) records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    )


def _resolve_log_path(configured_path: str) -> Path:
    """Relative log paths live under the project root."""
    path = Path(configured_path)
    return path if path.is_absolute() else find_project_root() / path


def _file_handler(settings: FileHandlerSchema) -> logging.Handler:
    log_path = _resolve_log_path(settings.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    return handler


def _console_handler(format_type: str) -> logging.Handler:
    if format_type == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(renderer))
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
    config: LoggingSchema | None = None,
) -> None:
    """
    Route structlog through stdlib logging and install the handlers.

    Replaces any handlers already on the root logger, so calling it twice
    is safe. The file handler always writes JSON lines; the console uses
    `format_type`.

    Args:
        level: Root level, overrides logging.yaml
        format_type: "json" or "console", overrides logging.yaml
        enable_console: Console handler on/off, overrides logging.yaml
        enable_file_logging: JSONL file handler on/off, overrides logging.yaml
        config: Use these settings instead of loading logging.yaml
    """
    settings = config or get_app_config().logging
    handlers = settings.handlers

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel((level or settings.level).upper())
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if handlers.console.enabled if enable_console is None else enable_console:
        root_logger.addHandler(_console_handler(format_type or settings.format))
    if handlers.file.enabled if enable_file_logging is None else enable_file_logging:
        root_logger.addHandler(_file_handler(handlers.file))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Logger for a module; pass `__name__`."""
    return structlog.get_logger(name)


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """
    Bind `values` to every record logged inside the block.

    Binding is context-local: a block inside one asyncio task does not
    leak into records of other tasks.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log `message` at `level` with an explicit `source` field.

    Example:
        log_with_source(logger, "repository", "debug", "Note archived", note_id="abc")
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
