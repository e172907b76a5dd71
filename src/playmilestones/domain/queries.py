"""Read-side views over the progress store.

Every query is a pure function of the store's current contents (plus the clock for the
few views that measure against "now"). Results are dataclasses whose ``to_dict`` returns
JSON-ready mappings with the camelCase field names the dashboard consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from playmilestones.domain.clock import system_clock
from playmilestones.domain.errors import UnknownLeaderboardMetricError
from playmilestones.domain.normalization import DEFAULT_ARTIST_ALIASES, normalize_artist
from playmilestones.domain.types import days_between

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from playmilestones.domain.clock import Clock
    from playmilestones.domain.normalization import ArtistAlias
    from playmilestones.domain.progress import ProgressStore
    from playmilestones.domain.types import (
        AlbumProgress,
        ArtistKey,
        ArtistProgress,
        EpochMillis,
        MilestoneRecord,
    )

DEFAULT_LEADERBOARD_LIMIT = 20


class LeaderboardMetric(StrEnum):
    TOTAL_PLAYS = "totalPlays"
    PLAY_RATE = "playRate"
    ACCELERATION = "acceleration"
    FASTEST_TO_FIFTY = "fastestToFifty"
    ALBUM_COUNT = "albumCount"


def milestone_to_dict(record: MilestoneRecord) -> dict[str, object]:
    payload: dict[str, object] = {
        "artist": record.artist,
        "milestone": record.milestone,
        "reachedAt": record.reached_at,
        "daysSinceFirstListen": record.days_since_first_listen,
        "playRate": record.play_rate,
    }
    if record.album is not None:
        payload["album"] = record.album
    return payload


def _name_order(name: str) -> tuple[str, str]:
    return (name.casefold(), name)


# Comparison ----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ComparisonEntry:
    artist: ArtistKey
    first_listen: EpochMillis
    total_plays: int
    days_to_ten_plays: int | None
    days_to_fifty_plays: int | None
    days_to_hundred_plays: int | None
    current_play_rate: float | None
    acceleration: float | None
    albums: int
    milestones: tuple[MilestoneRecord, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "artist": self.artist,
            "firstListen": self.first_listen,
            "totalPlays": self.total_plays,
            "daysToTenPlays": self.days_to_ten_plays,
            "daysToFiftyPlays": self.days_to_fifty_plays,
            "daysToHundredPlays": self.days_to_hundred_plays,
            "currentPlayRate": self.current_play_rate,
            "acceleration": self.acceleration,
            "albums": self.albums,
            "milestones": [milestone_to_dict(record) for record in self.milestones],
        }


@dataclass(frozen=True, slots=True)
class Comparison:
    """The requested artists ranked four ways."""

    by_total_plays: tuple[ComparisonEntry, ...]
    by_play_rate: tuple[ComparisonEntry, ...]
    by_fastest_to_fifty: tuple[ComparisonEntry, ...]
    by_acceleration: tuple[ComparisonEntry, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "byTotalPlays": [entry.to_dict() for entry in self.by_total_plays],
            "byPlayRate": [entry.to_dict() for entry in self.by_play_rate],
            "byFastestToFifty": [entry.to_dict() for entry in self.by_fastest_to_fifty],
            "byAcceleration": [entry.to_dict() for entry in self.by_acceleration],
        }


def _comparison_entry(artist_key: ArtistKey, progress: ArtistProgress) -> ComparisonEntry:
    metrics = progress.metrics
    return ComparisonEntry(
        artist=artist_key,
        first_listen=progress.first_listen_date,
        total_plays=progress.total_plays,
        days_to_ten_plays=metrics.days_to_ten_plays,
        days_to_fifty_plays=metrics.days_to_fifty_plays,
        days_to_hundred_plays=metrics.days_to_hundred_plays,
        current_play_rate=metrics.play_rate,
        acceleration=metrics.acceleration_rate,
        albums=progress.album_count,
        milestones=tuple(progress.milestones),
    )


# Albums --------------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AlbumEntry:
    album: str
    first_listen: EpochMillis
    total_plays: int
    days_to_ten_plays: int | None
    days_to_fifty_plays: int | None
    play_rate: float | None
    milestones: tuple[MilestoneRecord, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "album": self.album,
            "firstListen": self.first_listen,
            "totalPlays": self.total_plays,
            "daysToTenPlays": self.days_to_ten_plays,
            "daysToFiftyPlays": self.days_to_fifty_plays,
            "playRate": self.play_rate,
            "milestones": [milestone_to_dict(record) for record in self.milestones],
        }


@dataclass(frozen=True, slots=True)
class AlbumComparison:
    artist: ArtistKey
    albums: tuple[AlbumEntry, ...]
    fastest_to_ten: AlbumEntry | None
    highest_play_rate: AlbumEntry | None

    def to_dict(self) -> dict[str, object]:
        return {
            "artist": self.artist,
            "albums": [entry.to_dict() for entry in self.albums],
            "fastestToTen": self.fastest_to_ten.to_dict() if self.fastest_to_ten else None,
            "highestPlayRate": (
                self.highest_play_rate.to_dict() if self.highest_play_rate else None
            ),
        }


def _album_entry(album: AlbumProgress) -> AlbumEntry:
    return AlbumEntry(
        album=album.title,
        first_listen=album.first_listen_date,
        total_plays=album.total_plays,
        days_to_ten_plays=album.metrics.days_to_ten_plays,
        days_to_fifty_plays=album.metrics.days_to_fifty_plays,
        play_rate=album.metrics.play_rate,
        milestones=tuple(album.milestones),
    )


# Trajectory ----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TrajectoryPoint:
    days: int
    plays: int
    label: str
    play_rate: float | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "days": self.days,
            "plays": self.plays,
            "milestone": self.label,
        }
        if self.play_rate is not None:
            payload["playRate"] = self.play_rate
        return payload


@dataclass(frozen=True, slots=True)
class GrowthTrajectory:
    artist: ArtistKey
    trajectory: tuple[TrajectoryPoint, ...]
    total_days: int
    total_plays: int
    average_play_rate: float | None

    def to_dict(self) -> dict[str, object]:
        return {
            "artist": self.artist,
            "trajectory": [point.to_dict() for point in self.trajectory],
            "totalDays": self.total_days,
            "totalPlays": self.total_plays,
            "averagePlayRate": self.average_play_rate,
        }


# Leaderboard ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    artist: ArtistKey
    total_plays: int
    days_active: int
    play_rate: float
    acceleration: float
    album_count: int
    milestone_count: int
    days_to_fifty: int | None
    days_to_hundred: int | None

    def to_dict(self) -> dict[str, object]:
        return {
            "artist": self.artist,
            "totalPlays": self.total_plays,
            "daysActive": self.days_active,
            "playRate": self.play_rate,
            "acceleration": self.acceleration,
            "albumCount": self.album_count,
            "milestoneCount": self.milestone_count,
            "daysToFifty": self.days_to_fifty,
            "daysToHundred": self.days_to_hundred,
        }


@dataclass(frozen=True, slots=True)
class LeaderboardPage:
    metric: LeaderboardMetric
    artists: tuple[LeaderboardEntry, ...]
    total: int
    offset: int
    limit: int

    def to_dict(self) -> dict[str, object]:
        return {
            "metric": self.metric.value,
            "artists": [entry.to_dict() for entry in self.artists],
            "total": self.total,
            "offset": self.offset,
            "limit": self.limit,
        }


type _LeaderboardKey = Callable[[LeaderboardEntry], tuple[object, ...]]

_LEADERBOARD_ORDER: dict[LeaderboardMetric, _LeaderboardKey] = {
    LeaderboardMetric.TOTAL_PLAYS: lambda e: (-e.total_plays, *_name_order(e.artist)),
    LeaderboardMetric.PLAY_RATE: lambda e: (-e.play_rate, *_name_order(e.artist)),
    LeaderboardMetric.ACCELERATION: lambda e: (-e.acceleration, *_name_order(e.artist)),
    LeaderboardMetric.FASTEST_TO_FIFTY: lambda e: (
        e.days_to_fifty is None,
        e.days_to_fifty or 0,
        *_name_order(e.artist),
    ),
    LeaderboardMetric.ALBUM_COUNT: lambda e: (-e.album_count, *_name_order(e.artist)),
}


def parse_leaderboard_metric(metric: str | LeaderboardMetric) -> LeaderboardMetric:
    try:
        return LeaderboardMetric(metric)
    except ValueError:
        raise UnknownLeaderboardMetricError(
            str(metric), supported=tuple(item.value for item in LeaderboardMetric)
        ) from None


# Awards --------------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Award:
    id: str
    title: str
    description: str
    artist: str
    metric: str
    color: str

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "artist": self.artist,
            "metric": self.metric,
            "color": self.color,
        }


type _Candidate = tuple[ArtistKey, ArtistProgress]


def _highest(
    candidates: Iterable[_Candidate],
    value: Callable[[ArtistProgress], float],
) -> _Candidate | None:
    ranked = sorted(candidates, key=lambda item: (-value(item[1]), *_name_order(item[0])))
    return ranked[0] if ranked else None


def _lowest(
    candidates: Iterable[_Candidate],
    value: Callable[[ArtistProgress], float],
) -> _Candidate | None:
    ranked = sorted(candidates, key=lambda item: (value(item[1]), *_name_order(item[0])))
    return ranked[0] if ranked else None


# Engine --------------------------------------------------------------------------------


class QueryEngine:
    """Serves comparisons, trajectories, leaderboards and awards from a store."""

    def __init__(
        self,
        store: ProgressStore,
        *,
        aliases: Sequence[ArtistAlias] = DEFAULT_ARTIST_ALIASES,
        clock: Clock = system_clock,
    ) -> None:
        self._store = store
        self._aliases = tuple(aliases)
        self._clock = clock

    def _lookup(self, artist_name: str) -> tuple[ArtistKey, ArtistProgress] | None:
        artist_key = normalize_artist(artist_name, self._aliases)
        progress = self._store.get(artist_key)
        if progress is None:
            return None
        return artist_key, progress

    def compare(self, artist_names: Iterable[str]) -> Comparison:
        """Rank the known subset of ``artist_names``; unknown names are left out."""

        entries: list[ComparisonEntry] = []
        seen: set[ArtistKey] = set()
        for name in artist_names:
            found = self._lookup(name)
            if found is None or found[0] in seen:
                continue
            seen.add(found[0])
            entries.append(_comparison_entry(*found))

        return Comparison(
            by_total_plays=tuple(
                sorted(entries, key=lambda e: (-e.total_plays, *_name_order(e.artist)))
            ),
            by_play_rate=tuple(
                sorted(
                    entries,
                    key=lambda e: (-(e.current_play_rate or 0.0), *_name_order(e.artist)),
                )
            ),
            by_fastest_to_fifty=tuple(
                sorted(
                    (e for e in entries if e.days_to_fifty_plays is not None),
                    key=lambda e: (e.days_to_fifty_plays or 0, *_name_order(e.artist)),
                )
            ),
            by_acceleration=tuple(
                sorted(
                    (e for e in entries if e.acceleration is not None),
                    key=lambda e: (-(e.acceleration or 0.0), *_name_order(e.artist)),
                )
            ),
        )

    def album_comparison(self, artist_name: str) -> AlbumComparison | None:
        found = self._lookup(artist_name)
        if found is None:
            return None
        artist_key, progress = found

        albums = sorted(
            map(_album_entry, list(progress.albums.values())),
            key=lambda a: (-a.total_plays, *_name_order(a.album)),
        )
        with_ten = [a for a in albums if a.days_to_ten_plays is not None]
        with_rate = [a for a in albums if a.play_rate is not None]
        fastest = min(with_ten, key=lambda a: a.days_to_ten_plays or 0, default=None)
        highest = max(with_rate, key=lambda a: a.play_rate or 0.0, default=None)

        return AlbumComparison(
            artist=artist_key,
            albums=tuple(albums),
            fastest_to_ten=fastest,
            highest_play_rate=highest,
        )

    def growth_trajectory(self, artist_name: str) -> GrowthTrajectory | None:
        found = self._lookup(artist_name)
        if found is None:
            return None
        artist_key, progress = found

        milestones = sorted(progress.milestones, key=lambda record: record.milestone)
        points = [TrajectoryPoint(days=0, plays=0, label="First Listen")]
        points.extend(
            TrajectoryPoint(
                days=record.days_since_first_listen,
                plays=record.milestone,
                label=f"{record.milestone} plays",
                play_rate=record.play_rate,
            )
            for record in milestones
        )

        total_days = progress.days_active(self._clock())
        last_milestone = milestones[-1].milestone if milestones else 0
        if progress.total_plays > last_milestone:
            points.append(
                TrajectoryPoint(
                    days=total_days,
                    plays=progress.total_plays,
                    label="Current",
                    play_rate=progress.metrics.play_rate,
                )
            )

        return GrowthTrajectory(
            artist=artist_key,
            trajectory=tuple(points),
            total_days=total_days,
            total_plays=progress.total_plays,
            average_play_rate=progress.metrics.play_rate,
        )

    def leaderboard(
        self,
        metric: str | LeaderboardMetric = LeaderboardMetric.TOTAL_PLAYS,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
        offset: int = 0,
    ) -> LeaderboardPage:
        """Return the ``[offset, offset + limit)`` slice of all artists ranked by ``metric``.

        Ties are broken by artist name, so pages are stable between calls as long as no
        plays are recorded in between.
        """

        resolved = parse_leaderboard_metric(metric)
        if limit < 0 or offset < 0:
            raise ValueError("Leaderboard limit and offset must be non-negative")

        now = self._clock()
        entries = [
            LeaderboardEntry(
                artist=artist_key,
                total_plays=progress.total_plays,
                days_active=progress.days_active(now),
                play_rate=progress.metrics.play_rate or 0.0,
                acceleration=progress.metrics.acceleration_rate or 0.0,
                album_count=progress.album_count,
                milestone_count=len(progress.milestones),
                days_to_fifty=progress.metrics.days_to_fifty_plays,
                days_to_hundred=progress.metrics.days_to_hundred_plays,
            )
            for artist_key, progress in self._store.all()
        ]
        entries.sort(key=_LEADERBOARD_ORDER[resolved])

        return LeaderboardPage(
            metric=resolved,
            artists=tuple(entries[offset : offset + limit]),
            total=len(entries),
            offset=offset,
            limit=limit,
        )

    def awards(self) -> list[Award]:
        """Evaluate the award catalogue; awards nobody qualifies for are left out."""

        artists = list(self._store.all())
        if not artists:
            return []
        now = self._clock()
        awards: list[Award] = []

        speed = _lowest(
            ((key, p) for key, p in artists if p.metrics.days_to_fifty_plays is not None),
            lambda p: p.metrics.days_to_fifty_plays or 0,
        )
        if speed is not None:
            days = speed[1].metrics.days_to_fifty_plays
            awards.append(
                Award(
                    id="speed-demon",
                    title="Speed Demon 🏎️",
                    description=f"Reached 50 plays in just {days} days",
                    artist=speed[0],
                    metric=f"{days} days",
                    color="#FF6B6B",
                )
            )

        marathon = _highest(artists, lambda p: p.total_plays)
        if marathon is not None and marathon[1].total_plays > 100:
            plays = marathon[1].total_plays
            awards.append(
                Award(
                    id="marathon-listener",
                    title="Marathon Listener 🎧",
                    description=f"{plays} total plays",
                    artist=marathon[0],
                    metric=f"{plays} plays",
                    color="#4ECDC4",
                )
            )

        day_one = _highest(
            (
                (key, p)
                for key, p in artists
                if (p.metrics.play_rate or 0.0) > 1
                and p.days_active(now) > 30
                and p.total_plays > 50
            ),
            lambda p: p.metrics.play_rate or 0.0,
        )
        if day_one is not None:
            rate = day_one[1].metrics.play_rate or 0.0
            awards.append(
                Award(
                    id="day-one-fan",
                    title="Day One Fan 💯",
                    description=f"{rate:.1f} plays/day consistently",
                    artist=day_one[0],
                    metric=f"{rate:.1f}/day",
                    color="#95E77E",
                )
            )

        rising = _highest(
            (
                (key, p)
                for key, p in artists
                if (p.metrics.acceleration_rate or 0.0) > 0 and p.total_plays > 25
            ),
            lambda p: p.metrics.acceleration_rate or 0.0,
        )
        if rising is not None:
            acceleration = rising[1].metrics.acceleration_rate or 0.0
            awards.append(
                Award(
                    id="rising-star",
                    title="Rising Star ⭐",
                    description=f"Accelerating at +{acceleration:.4f} plays/day²",
                    artist=rising[0],
                    metric=f"+{acceleration:.4f}/day²",
                    color="#FFE66D",
                )
            )

        collector = _highest(
            ((key, p) for key, p in artists if p.album_count > 3 and p.total_plays > 50),
            lambda p: p.album_count,
        )
        if collector is not None:
            count = collector[1].album_count
            awards.append(
                Award(
                    id="album-collector",
                    title="Album Collector 📀",
                    description=f"{count} different albums played",
                    artist=collector[0],
                    metric=f"{count} albums",
                    color="#A8E6CF",
                )
            )

        slow_burn = _highest(
            ((key, p) for key, p in artists if p.metrics.days_to_hundred_plays is not None),
            lambda p: p.metrics.days_to_hundred_plays or 0,
        )
        if slow_burn is not None and (slow_burn[1].metrics.days_to_hundred_plays or 0) > 50:
            days = slow_burn[1].metrics.days_to_hundred_plays
            awards.append(
                Award(
                    id="slow-burn",
                    title="Slow Burn 🔥",
                    description=f"Took {days} days to reach 100 plays",
                    artist=slow_burn[0],
                    metric=f"{days} days",
                    color="#FF8B94",
                )
            )

        thousand_club = [(key, p) for key, p in artists if p.total_plays >= 1000]
        leader = _highest(thousand_club, lambda p: p.total_plays)
        if leader is not None:
            members = len(thousand_club)
            awards.append(
                Award(
                    id="thousand-club",
                    title="1K Club Member 🏆",
                    description=f"Elite club of {members} artist{'s' if members > 1 else ''}",
                    artist=leader[0],
                    metric=f"{leader[1].total_plays} plays",
                    color="#FFD700",
                )
            )

        discovered = sum(1 for _, p in artists if p.total_plays >= 10)
        if discovered > 50:
            awards.append(
                Award(
                    id="discovery-mode",
                    title="Discovery Mode 🔍",
                    description=f"{discovered} artists with 10+ plays",
                    artist="Your Library",
                    metric=f"{discovered} artists",
                    color="#B4A7D6",
                )
            )

        binge = _highest(
            (
                (key, p)
                for key, p in artists
                if p.days_active(now) < 30 and p.total_plays > 100
            ),
            lambda p: p.total_plays,
        )
        if binge is not None:
            days = binge[1].days_active(now)
            plays = binge[1].total_plays
            awards.append(
                Award(
                    id="binge-master",
                    title="Binge Master 🎵",
                    description=f"{plays} plays in just {days} days",
                    artist=binge[0],
                    metric=f"{plays / days:.1f}/day",
                    color="#C39BD3",
                )
            )

        return awards


__all__ = [
    "DEFAULT_LEADERBOARD_LIMIT",
    "AlbumComparison",
    "AlbumEntry",
    "Award",
    "Comparison",
    "ComparisonEntry",
    "GrowthTrajectory",
    "LeaderboardEntry",
    "LeaderboardMetric",
    "LeaderboardPage",
    "QueryEngine",
    "TrajectoryPoint",
    "milestone_to_dict",
    "parse_leaderboard_metric",
]
