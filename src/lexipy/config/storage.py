"""Where lexipy keeps its database, HTTP cache and provider snapshot files.

Everything lives below one data directory: ``LEXIPY_DATA_DIR`` when set, otherwise
the platform's per-user data location. ``DATABASE_URI`` and ``ENRICHMENT_DIR``
override the individual locations.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "lexipy"
DEFAULT_DB_FILENAME: Final[str] = "lexipy.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
ENRICHMENT_DIRNAME: Final[str] = "enrichment"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def path_for(self, name: str, *, create_parent: bool = True) -> Path:
        """Return ``name`` below the data directory, creating the directory if asked."""

        base = self.resolve_data_dir()
        if create_parent:
            base.mkdir(parents=True, exist_ok=True)
        return base / name


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    explicit = os.getenv("LEXIPY_DATA_DIR")
    data_dir = Path(explicit) if explicit else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    if uri := os.getenv("DATABASE_URI"):
        return DatabaseConfig(uri=uri)
    database_path = (storage or get_storage_config()).path_for(DEFAULT_DB_FILENAME)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{database_path}")


def get_database_uri() -> str:
    return get_database_config().uri


def get_http_cache_path() -> Path:
    return get_storage_config().path_for(HTTP_CACHE_FILENAME)


def get_enrichment_dir(*, storage: StorageConfig | None = None) -> Path:
    """Root of the per part-of-speech, per-provider snapshot files."""

    if explicit := os.getenv("ENRICHMENT_DIR"):
        return Path(explicit).expanduser().resolve()
    return (storage or get_storage_config()).path_for(ENRICHMENT_DIRNAME)
