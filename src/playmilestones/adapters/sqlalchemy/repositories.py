"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, insert, select

from playmilestones.adapters.documents import (
    ArtistProgressPayload,
    artist_from_payload,
    artist_to_payload,
)
from playmilestones.adapters.sqlalchemy.mappings import artist_progress_table, milestone_table
from playmilestones.domain.types import MilestoneRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy.orm import Session

    from playmilestones.domain.types import ArtistKey, ArtistProgress


class SqlAlchemyArtistProgressRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def load_all(self) -> dict[ArtistKey, ArtistProgress]:
        stmt = select(
            artist_progress_table.c.artist_key, artist_progress_table.c.document
        ).order_by(artist_progress_table.c.artist_key)
        artists: dict[ArtistKey, ArtistProgress] = {}
        for artist_key, document in self.session.execute(stmt):
            payload = ArtistProgressPayload.model_validate(cast("dict[str, object]", document))
            artists[artist_key] = artist_from_payload(payload)
        return artists

    def replace_all(self, artists: Mapping[ArtistKey, ArtistProgress]) -> None:
        self.session.execute(delete(artist_progress_table))
        rows = [
            {
                "artist_key": artist_key,
                "first_listen_date": progress.first_listen_date,
                "total_plays": progress.total_plays,
                "document": artist_to_payload(progress).model_dump(mode="json", by_alias=True),
            }
            for artist_key, progress in artists.items()
        ]
        if rows:
            self.session.execute(insert(artist_progress_table), rows)


class SqlAlchemyMilestoneRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def load_all(self) -> list[MilestoneRecord]:
        stmt = select(
            milestone_table.c.artist,
            milestone_table.c.album,
            milestone_table.c.milestone,
            milestone_table.c.reached_at,
            milestone_table.c.days_since_first_listen,
            milestone_table.c.play_rate,
        ).order_by(milestone_table.c.id)
        return [
            MilestoneRecord(
                artist=row.artist,
                album=row.album,
                milestone=row.milestone,
                reached_at=row.reached_at,
                days_since_first_listen=row.days_since_first_listen,
                play_rate=row.play_rate,
            )
            for row in self.session.execute(stmt)
        ]

    def replace_all(self, milestones: Iterable[MilestoneRecord]) -> None:
        self.session.execute(delete(milestone_table))
        rows = [
            {
                "artist": record.artist,
                "album": record.album,
                "milestone": record.milestone,
                "reached_at": record.reached_at,
                "days_since_first_listen": record.days_since_first_listen,
                "play_rate": record.play_rate,
            }
            for record in milestones
        ]
        if rows:
            self.session.execute(insert(milestone_table), rows)


if TYPE_CHECKING:
    from playmilestones.domain.ports.persistence import (
        ArtistProgressRepository,
        MilestoneRepository,
    )

    _session_stub = cast("Session", object())
    _artist_repo: ArtistProgressRepository = SqlAlchemyArtistProgressRepository(_session_stub)
    _milestone_repo: MilestoneRepository = SqlAlchemyMilestoneRepository(_session_stub)


__all__ = ["SqlAlchemyArtistProgressRepository", "SqlAlchemyMilestoneRepository"]
