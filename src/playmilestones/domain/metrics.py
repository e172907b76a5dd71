"""Rolling play-rate and acceleration estimates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from playmilestones.domain.types import days_between

if TYPE_CHECKING:
    from collections.abc import Sequence

    from playmilestones.domain.types import (
        AlbumProgress,
        ArtistProgress,
        EpochMillis,
        MilestoneRecord,
    )

ACCELERATION_MIN_DAYS: Final[int] = 7


def update_artist_metrics(progress: ArtistProgress, timestamp: EpochMillis) -> None:
    """Refresh ``play_rate`` and ``acceleration_rate`` after a play at ``timestamp``."""

    days = days_between(progress.first_listen_date, timestamp)
    progress.metrics.play_rate = progress.total_plays / days
    progress.metrics.acceleration_rate = estimate_acceleration(
        progress.total_plays, days, progress.milestones
    )


def update_album_metrics(album: AlbumProgress, timestamp: EpochMillis) -> None:
    days = days_between(album.first_listen_date, timestamp)
    album.metrics.play_rate = album.total_plays / days


def estimate_acceleration(
    total_plays: int,
    days: int,
    milestones: Sequence[MilestoneRecord],
) -> float:
    """Compare the play rate of the first and second half of the listening period.

    The result is ``(second_half_rate - first_half_rate) / days`` in plays/day². It is
    ``0.0`` for the first week, before any milestone, and whenever no milestone had been
    reached by the midpoint.
    """

    if days <= ACCELERATION_MIN_DAYS or not milestones:
        return 0.0

    midpoint = days // 2
    plays_at_midpoint = 0
    for milestone in milestones:
        if milestone.days_since_first_listen > midpoint:
            break
        plays_at_midpoint = milestone.milestone

    if plays_at_midpoint == 0:
        return 0.0

    first_half_rate = plays_at_midpoint / midpoint
    second_half_rate = (total_plays - plays_at_midpoint) / (days - midpoint)
    return (second_half_rate - first_half_rate) / days


__all__ = [
    "ACCELERATION_MIN_DAYS",
    "estimate_acceleration",
    "update_album_metrics",
    "update_artist_metrics",
]
