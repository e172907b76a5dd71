"""Builders for raw play records used across the tracker tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from playmilestones.domain.normalization import EventNormalizer
from playmilestones.domain.types import MILLIS_PER_DAY

if TYPE_CHECKING:
    from collections.abc import Iterable

    from playmilestones.domain.progress import ProgressStore
    from playmilestones.domain.types import MilestoneRecord

BASE_TIME: Final[int] = 1_700_000_000_000

type RawPlay = dict[str, object]


def at_day(day: float, *, offset_ms: int = 0) -> int:
    """Epoch millis ``day`` days after :data:`BASE_TIME`."""

    return BASE_TIME + int(day * MILLIS_PER_DAY) + offset_ms


def make_play(
    artist: str = "Example Artist",
    *,
    day: float = 0,
    offset_ms: int = 0,
    album: str | None = None,
    title: str | None = None,
    duration: int | None = None,
) -> RawPlay:
    record: RawPlay = {"artist": artist, "timestamp": at_day(day, offset_ms=offset_ms)}
    if album is not None:
        record["album"] = album
    if title is not None:
        record["title"] = title
    if duration is not None:
        record["duration"] = duration
    return record


def plays_on_days(
    artist: str,
    days: Iterable[float],
    *,
    album: str | None = None,
) -> list[RawPlay]:
    """One play per entry in ``days``; plays on the same day are one millisecond apart."""

    records: list[RawPlay] = []
    for index, day in enumerate(days):
        records.append(make_play(artist, day=day, offset_ms=index, album=album))
    return records


def repeated_plays(
    artist: str,
    count: int,
    *,
    day: float = 0,
    album: str | None = None,
) -> list[RawPlay]:
    return plays_on_days(artist, [day] * count, album=album)


def feed_store(
    store: ProgressStore,
    records: Iterable[RawPlay],
    *,
    normalizer: EventNormalizer | None = None,
) -> list[MilestoneRecord]:
    """Normalise and record ``records`` in order, returning every artist milestone reached."""

    effective = normalizer or EventNormalizer()
    reached: list[MilestoneRecord] = []
    for record in records:
        play = effective.normalize(record)
        assert play is not None, record
        reached.extend(store.record_play(play))
    return reached
