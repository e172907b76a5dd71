"""Detect play-count thresholds crossed by the latest play."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playmilestones.domain.types import (
    ALBUM_MILESTONE_THRESHOLDS,
    ARTIST_MILESTONE_THRESHOLDS,
    MilestoneRecord,
    days_between,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from playmilestones.domain.types import (
        AlbumProgress,
        ArtistKey,
        ArtistProgress,
        EpochMillis,
    )

log = logging.getLogger(__name__)


def check_artist_milestones(
    artist_key: ArtistKey,
    progress: ArtistProgress,
    timestamp: EpochMillis,
    *,
    thresholds: Sequence[int] = ARTIST_MILESTONE_THRESHOLDS,
) -> list[MilestoneRecord]:
    """Record every threshold that ``progress.total_plays`` now equals.

    Detection is on exact equality: a count that skips over a threshold never records it.
    New records are appended to ``progress.milestones`` and returned so the caller can add
    them to the global milestone list.
    """

    reached: list[MilestoneRecord] = []
    for threshold in thresholds:
        if progress.total_plays != threshold:
            continue
        days = days_between(progress.first_listen_date, timestamp)
        record = MilestoneRecord(
            artist=artist_key,
            milestone=threshold,
            reached_at=timestamp,
            days_since_first_listen=days,
            play_rate=threshold / days,
        )
        progress.milestones.append(record)
        reached.append(record)

        metrics = progress.metrics
        if threshold == 10:
            metrics.days_to_ten_plays = days
        elif threshold == 50:
            metrics.days_to_fifty_plays = days
        elif threshold == 100:
            metrics.days_to_hundred_plays = days

        log.info("%s reached %s plays in %s days", artist_key, threshold, days)
    return reached


def check_album_milestones(
    artist_key: ArtistKey,
    album: AlbumProgress,
    timestamp: EpochMillis,
    *,
    thresholds: Sequence[int] = ALBUM_MILESTONE_THRESHOLDS,
) -> list[MilestoneRecord]:
    """Album counterpart of :func:`check_artist_milestones`.

    Album records stay on the album; they never feed the artist-level day counts.
    """

    reached: list[MilestoneRecord] = []
    for threshold in thresholds:
        if album.total_plays != threshold:
            continue
        days = days_between(album.first_listen_date, timestamp)
        record = MilestoneRecord(
            artist=artist_key,
            album=album.title,
            milestone=threshold,
            reached_at=timestamp,
            days_since_first_listen=days,
            play_rate=threshold / days,
        )
        album.milestones.append(record)
        reached.append(record)

        if threshold == 10:
            album.metrics.days_to_ten_plays = days
        elif threshold == 50:
            album.metrics.days_to_fifty_plays = days

        log.info(
            'Album "%s" by %s reached %s plays in %s days', album.title, artist_key, threshold, days
        )
    return reached


__all__ = ["check_album_milestones", "check_artist_milestones"]
