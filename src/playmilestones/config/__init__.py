"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .storage import (
    PersistenceConfig,
    StorageBackend,
    StorageConfig,
    get_persistence_config,
    get_storage_config,
)
from .tracker import TrackerConfig, get_tracker_config

__all__ = [
    "ConfigurationError",
    "PersistenceConfig",
    "StorageBackend",
    "StorageConfig",
    "TrackerConfig",
    "configure_logging",
    "get_persistence_config",
    "get_storage_config",
    "get_tracker_config",
]
