"""SQLAlchemy adapter package for playmilestones."""

from __future__ import annotations

from .gateway import SqlAlchemyProgressGateway
from .mappings import artist_progress_table, create_all_tables, metadata, milestone_table
from .repositories import SqlAlchemyArtistProgressRepository, SqlAlchemyMilestoneRepository
from .unit_of_work import SqlAlchemyProgressUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyArtistProgressRepository",
    "SqlAlchemyMilestoneRepository",
    "SqlAlchemyProgressGateway",
    "SqlAlchemyProgressUnitOfWork",
    "StartupError",
    "artist_progress_table",
    "create_all_tables",
    "metadata",
    "milestone_table",
    "shutdown",
    "startup",
]
