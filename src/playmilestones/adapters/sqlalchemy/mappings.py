"""SQLAlchemy table metadata for persisted tracker state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# The full progress record (albums, milestone copies, metrics) lives in ``document`` using
# the same layout as artist-progress.json; the scalar columns exist for ad-hoc SQL.
artist_progress_table = Table(
    "artist_progress",
    metadata,
    Column("artist_key", String, primary_key=True),
    Column("first_listen_date", BigInteger, nullable=False),
    Column("total_plays", Integer, nullable=False),
    Column("document", JSON, nullable=False),
)

milestone_table = Table(
    "milestone",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("artist", String, nullable=False),
    Column("album", String, nullable=True),
    Column("milestone", Integer, nullable=False),
    Column("reached_at", BigInteger, nullable=False),
    Column("days_since_first_listen", Integer, nullable=False),
    Column("play_rate", Float, nullable=False),
    Index("ix_milestone_artist", "artist"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the tracker metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)


__all__ = ["artist_progress_table", "create_all_tables", "metadata", "milestone_table"]
