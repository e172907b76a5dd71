"""Canonicalise raw play records into the shape the progress store consumes.

Responsibilities of this stage:
- fold known spellings of an artist into one display name
- coerce timestamps into epoch milliseconds
- reject records without an artist or a usable timestamp (counted, never raised)
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from playmilestones.domain.types import NormalizedPlay, PlayEvent

if TYPE_CHECKING:
    from collections.abc import Sequence

    from playmilestones.domain.types import ArtistKey, EpochMillis

type RawPlayRecord = Mapping[str, object] | PlayEvent

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArtistAlias:
    """Maps every artist name matching ``pattern`` (lower-cased) to ``canonical_name``."""

    pattern: re.Pattern[str]
    canonical_name: str

    @classmethod
    def from_regex(cls, pattern: str, canonical_name: str) -> ArtistAlias:
        return cls(pattern=re.compile(pattern), canonical_name=canonical_name)

    def matches(self, folded_name: str) -> bool:
        return self.pattern.search(folded_name) is not None


DEFAULT_ARTIST_ALIASES: tuple[ArtistAlias, ...] = (
    ArtistAlias.from_regex(r"^(?=.*blink)(?=.*182)", "blink-182"),
    ArtistAlias.from_regex(r"^knox$", "Knox"),
)


def normalize_artist(
    name: str,
    aliases: Sequence[ArtistAlias] = DEFAULT_ARTIST_ALIASES,
) -> ArtistKey:
    """Return the canonical display name for ``name``.

    Unmapped names are only trimmed, so their original casing is preserved.
    """

    trimmed = name.strip()
    folded = trimmed.lower()
    for alias in aliases:
        if alias.matches(folded):
            return alias.canonical_name
    return trimmed


def coerce_timestamp(value: object) -> EpochMillis | None:
    """Convert ``value`` into epoch milliseconds, or ``None`` when it is unusable."""

    millis: int | None
    if isinstance(value, bool):
        millis = None
    elif isinstance(value, int):
        millis = value
    elif isinstance(value, float):
        millis = int(value) if math.isfinite(value) else None
    elif isinstance(value, datetime):
        millis = _datetime_to_millis(value)
    elif isinstance(value, str):
        millis = _parse_timestamp_text(value)
    else:
        millis = None

    if millis is None or millis <= 0:
        return None
    return millis


def _parse_timestamp_text(value: str) -> int | None:
    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        pass
    else:
        return int(number) if math.isfinite(number) else None

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _datetime_to_millis(parsed)


def _datetime_to_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp() * 1000)


def _clean_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _coerce_duration(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


@dataclass(slots=True)
class EventNormalizer:
    """Validates raw play records and keys them by canonical artist name."""

    aliases: tuple[ArtistAlias, ...] = DEFAULT_ARTIST_ALIASES
    rejected: int = 0

    def normalize(self, raw: object) -> NormalizedPlay | None:
        """Return the play for a mapping or :class:`PlayEvent`; anything else is rejected."""

        if isinstance(raw, PlayEvent):
            fields: Mapping[str, object] = {
                "artist": raw.artist,
                "timestamp": raw.timestamp,
                "album": raw.album,
                "title": raw.title,
                "duration": raw.duration,
            }
        elif isinstance(raw, Mapping):
            fields = raw
        else:
            return self._reject(raw, "unsupported record type")

        artist = _clean_text(fields.get("artist"))
        if artist is None:
            return self._reject(raw, "missing artist")
        timestamp = coerce_timestamp(fields.get("timestamp"))
        if timestamp is None:
            return self._reject(raw, "missing or invalid timestamp")

        duration = fields.get("duration")
        if duration is None:
            duration = fields.get("length")

        return NormalizedPlay(
            artist_key=normalize_artist(artist, self.aliases),
            timestamp=timestamp,
            album=_clean_text(fields.get("album")),
            title=_clean_text(fields.get("title")),
            duration=_coerce_duration(duration),
        )

    def artist_key(self, name: str) -> ArtistKey:
        return normalize_artist(name, self.aliases)

    def reset_counters(self) -> None:
        self.rejected = 0

    def _reject(self, raw: object, reason: str) -> None:
        self.rejected += 1
        log.debug("Skipping play record (%s): %r", reason, raw)


__all__ = [
    "DEFAULT_ARTIST_ALIASES",
    "ArtistAlias",
    "EventNormalizer",
    "RawPlayRecord",
    "coerce_timestamp",
    "normalize_artist",
]
