"""
Configuration Schemas.

One strict pydantic model per file in config/settings/. AppConfig
validates every file against its model when it loads, so a typo or a
wrong type fails at startup with the file name in the message.

    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    ControllersSchema  → controllers.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


class _StrictBase(BaseModel):
    """Rejects unknown keys."""

    model_config = ConfigDict(extra="forbid", frozen=True)


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str = Field(min_length=1)
    version: str
    description: str = ""
    environment: Literal["development", "test", "production"]


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    url: str = Field(description="SQLAlchemy async URL of the notes store")
    echo: bool = False
    create_tables: bool = True

    @field_validator("url")
    @classmethod
    def _parseable_url(cls, value: str) -> str:
        try:
            make_url(value)
        except ArgumentError as e:
            raise ValueError(f"not a SQLAlchemy URL: {value!r}") from e
        return value


# =============================================================================
# logging.yaml
# =============================================================================


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str = Field(min_length=1)
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: LogLevel
    format: Literal["json", "console"]
    handlers: HandlersSchema

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


# =============================================================================
# controllers.yaml
# =============================================================================


class ControllersSchema(_StrictBase):
    effect_buffer_size: int = Field(
        default=64,
        gt=0,
        description="Pending one-shot effects kept per controller",
    )
