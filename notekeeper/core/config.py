"""
Configuration Management.

Settings live in YAML under config/settings/ of the project root (the
directory holding the `.project_root` marker). Environment variables with
the NOTEKEEPER_ prefix, or config/.env when present, override them.

Environment:
    NOTEKEEPER_DATABASE_URL  - replaces database.yaml `url`

Usage:
    from notekeeper.core.config import get_app_config, get_database_url

    buffer = get_app_config().controllers.effect_buffer_size
    url = get_database_url()
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

from notekeeper.core.config_schema import (
    ApplicationSchema,
    ControllersSchema,
    DatabaseSchema,
    LoggingSchema,
)

PROJECT_MARKER = ".project_root"

SETTINGS_FILES: dict[str, type[BaseModel]] = {
    "application": ApplicationSchema,
    "database": DatabaseSchema,
    "logging": LoggingSchema,
    "controllers": ControllersSchema,
}


def find_project_root(start: Path | None = None) -> Path:
    """
    Walk up from `start` (default: the working directory) to the marker file.

    Raises:
        RuntimeError: If no parent directory holds `.project_root`
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / PROJECT_MARKER).exists():
            return directory
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def load_yaml_config(filename: str, root: Path | None = None) -> dict[str, Any]:
    """Read one file from config/settings/ as a mapping (empty file -> {})."""
    config_path = (root or find_project_root()) / "config" / "settings" / filename
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides. None means "use the YAML value"."""

    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="NOTEKEEPER_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig:
    """
    Every settings file, validated against its schema on construction.

    Properties return frozen pydantic models; a missing key, a wrong type
    or an unknown key raises ValueError naming the offending file.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or find_project_root()
        self._sections = {
            name: self._load(schema_cls, f"{name}.yaml")
            for name, schema_cls in SETTINGS_FILES.items()
        }

    def _load(self, schema_cls: type[BaseModel], filename: str) -> Any:
        raw = load_yaml_config(filename, self.root)
        try:
            return schema_cls.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e

    @property
    def application(self) -> ApplicationSchema:
        return self._sections["application"]

    @property
    def database(self) -> DatabaseSchema:
        return self._sections["database"]

    @property
    def logging(self) -> LoggingSchema:
        return self._sections["logging"]

    @property
    def controllers(self) -> ControllersSchema:
        return self._sections["controllers"]

    def resolve_database_url(self, override: str | None = None) -> str:
        """
        The async database URL, with relative SQLite paths made absolute.

        A relative SQLite file is placed under the project root and its
        directory is created, so the store does not follow the working
        directory around.
        """
        url = make_url(override or self.database.url)
        database = url.database
        if (
            url.get_backend_name() != "sqlite"
            or not database
            or database == ":memory:"
            or Path(database).is_absolute()
        ):
            return url.render_as_string(hide_password=False)

        path = self.root / database
        path.parent.mkdir(parents=True, exist_ok=True)
        return url.set(database=str(path)).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Environment overrides, reading config/.env when the project has one."""
    try:
        env_file = find_project_root() / "config" / ".env"
    except RuntimeError:
        return Settings()
    return Settings(_env_file=env_file if env_file.is_file() else None)


@lru_cache
def get_app_config() -> AppConfig:
    """Configuration of the project the process runs in. Cached."""
    return AppConfig()


def get_database_url() -> str:
    """Database URL after environment overrides and path resolution."""
    return get_app_config().resolve_database_url(get_settings().database_url)
