"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "playmilestones"
PROGRESS_FILENAME: Final[str] = "artist-progress.json"
MILESTONES_FILENAME: Final[str] = "artist-milestones.json"
DEFAULT_DB_FILENAME: Final[str] = "playmilestones.db"


class StorageBackend(StrEnum):
    JSON = "json"
    SQLALCHEMY = "sqlalchemy"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    progress_filename: str = PROGRESS_FILENAME
    milestones_filename: str = MILESTONES_FILENAME
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def progress_path(self) -> Path:
        return self.resolve_data_dir() / self.progress_filename

    def milestones_path(self) -> Path:
        return self.resolve_data_dir() / self.milestones_filename

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class PersistenceConfig:
    backend: StorageBackend
    database_uri: str
    storage: StorageConfig


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("PLAYMILESTONES_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_persistence_config(*, storage: StorageConfig | None = None) -> PersistenceConfig:
    storage_config = storage or get_storage_config()
    raw_backend = (optional_env_var("PLAYMILESTONES_BACKEND") or StorageBackend.JSON).lower()
    try:
        backend = StorageBackend(raw_backend)
    except ValueError as exc:
        supported = ", ".join(member.value for member in StorageBackend)
        raise ConfigurationError(
            f"PLAYMILESTONES_BACKEND must be one of {supported}, got {raw_backend!r}"
        ) from exc
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri is not None:
        database_uri = env_uri
    elif backend is StorageBackend.SQLALCHEMY:
        database_uri = storage_config.database_uri()
    else:
        # avoid creating the data directory just to describe an unused URI
        database_uri = f"sqlite+pysqlite:///{storage_config.database_path(ensure=False)}"
    return PersistenceConfig(backend=backend, database_uri=database_uri, storage=storage_config)
