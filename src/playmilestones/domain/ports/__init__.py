"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ArtistProgressRepository, MilestoneRepository, ProgressGateway
from .scheduling import TimerFactory, TimerHandle
from .unit_of_work import (
    ProgressRepositories,
    ProgressUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArtistProgressRepository",
    "MilestoneRepository",
    "ProgressGateway",
    "ProgressRepositories",
    "ProgressUnitOfWork",
    "RepositoryCollection",
    "TimerFactory",
    "TimerHandle",
    "UnitOfWork",
]
