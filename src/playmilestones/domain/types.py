"""Domain model for artist and album listening progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

# Basic aliases (PEP 695) so we can upgrade to value objects later.
type EpochMillis = int
type ArtistKey = str
type AlbumKey = str
type DurationMs = int

MILLIS_PER_DAY: Final[int] = 24 * 60 * 60 * 1000

ARTIST_MILESTONE_THRESHOLDS: Final[tuple[int, ...]] = (10, 25, 50, 100, 250, 500, 1000)
ALBUM_MILESTONE_THRESHOLDS: Final[tuple[int, ...]] = (10, 25, 50, 100)

ALBUM_KEY_SEPARATOR: Final[str] = "::"


class TrackerMode(StrEnum):
    """Operating modes of the milestone tracker."""

    STREAMING = "streaming"
    BATCH = "batch"


@dataclass(frozen=True, slots=True)
class PlayEvent:
    """A single listen as delivered by the audio controller or the history store."""

    artist: str
    timestamp: EpochMillis
    album: str | None = None
    title: str | None = None
    duration: DurationMs | None = None


@dataclass(frozen=True, slots=True)
class NormalizedPlay:
    """A validated play event keyed by its canonical artist name."""

    artist_key: ArtistKey
    timestamp: EpochMillis
    album: str | None = None
    title: str | None = None
    duration: DurationMs | None = None

    @property
    def album_key(self) -> AlbumKey | None:
        if self.album is None:
            return None
        return album_key_for(self.artist_key, self.album)


def album_key_for(artist_key: ArtistKey, album: str) -> AlbumKey:
    """Composite key that keeps equally titled albums of different artists apart."""

    return f"{artist_key}{ALBUM_KEY_SEPARATOR}{album}"


def days_between(start: EpochMillis, end: EpochMillis) -> int:
    """Whole days from ``start`` to ``end``, floored at one day."""

    return max(1, (end - start) // MILLIS_PER_DAY)


@dataclass(frozen=True, slots=True)
class MilestoneRecord:
    """Immutable record of the moment a play-count threshold was reached."""

    artist: ArtistKey
    milestone: int
    reached_at: EpochMillis
    days_since_first_listen: int
    play_rate: float
    album: str | None = None


@dataclass(slots=True)
class ArtistMetrics:
    days_to_ten_plays: int | None = None
    days_to_fifty_plays: int | None = None
    days_to_hundred_plays: int | None = None
    play_rate: float | None = None
    acceleration_rate: float | None = None


@dataclass(slots=True)
class AlbumMetrics:
    days_to_ten_plays: int | None = None
    days_to_fifty_plays: int | None = None
    play_rate: float | None = None


@dataclass(slots=True)
class AlbumProgress:
    """Cumulative listening state for one album of one artist."""

    title: str
    first_listen_date: EpochMillis
    total_plays: int = 0
    milestones: list[MilestoneRecord] = field(default_factory=list[MilestoneRecord])
    metrics: AlbumMetrics = field(default_factory=AlbumMetrics)


@dataclass(slots=True)
class ArtistProgress:
    """Cumulative listening state for one artist.

    ``first_listen_date`` is fixed by the first accepted play. ``milestones`` stays in
    ascending threshold order because thresholds are only ever reached in order.
    """

    first_listen_date: EpochMillis
    total_plays: int = 0
    albums: dict[AlbumKey, AlbumProgress] = field(default_factory=dict[AlbumKey, AlbumProgress])
    milestones: list[MilestoneRecord] = field(default_factory=list[MilestoneRecord])
    metrics: ArtistMetrics = field(default_factory=ArtistMetrics)

    @property
    def album_count(self) -> int:
        return len(self.albums)

    def days_active(self, now: EpochMillis) -> int:
        return days_between(self.first_listen_date, now)


@dataclass(slots=True)
class ProgressSnapshot:
    """Everything the tracker persists: per-artist progress plus the flat milestone list."""

    artists: dict[ArtistKey, ArtistProgress] = field(
        default_factory=dict[ArtistKey, ArtistProgress]
    )
    milestones: list[MilestoneRecord] = field(default_factory=list[MilestoneRecord])

    @property
    def is_empty(self) -> bool:
        return not self.artists and not self.milestones


__all__ = [
    "ALBUM_KEY_SEPARATOR",
    "ALBUM_MILESTONE_THRESHOLDS",
    "ARTIST_MILESTONE_THRESHOLDS",
    "MILLIS_PER_DAY",
    "AlbumKey",
    "AlbumMetrics",
    "AlbumProgress",
    "ArtistKey",
    "ArtistMetrics",
    "ArtistProgress",
    "DurationMs",
    "EpochMillis",
    "MilestoneRecord",
    "NormalizedPlay",
    "PlayEvent",
    "ProgressSnapshot",
    "TrackerMode",
    "album_key_for",
    "days_between",
]
