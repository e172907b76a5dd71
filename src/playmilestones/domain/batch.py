"""Full rebuild of tracker state from a historical play corpus."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from playmilestones.domain.normalization import EventNormalizer
    from playmilestones.domain.ports.persistence import ProgressGateway
    from playmilestones.domain.progress import ProgressStore
    from playmilestones.domain.types import NormalizedPlay

DEFAULT_PROGRESS_LOG_INTERVAL = 1000

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome of a historical reprocessing run."""

    tracks_processed: int
    unique_artists: int
    milestones_recorded: int
    processing_time_seconds: float
    events_rejected: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "tracksProcessed": self.tracks_processed,
            "uniqueArtists": self.unique_artists,
            "milestonesRecorded": self.milestones_recorded,
            "processingTime": self.processing_time_seconds,
            "eventsRejected": self.events_rejected,
        }


def _replay_order(play: NormalizedPlay) -> tuple[int, str, str, str, int]:
    # timestamp first; the rest only makes equal timestamps independent of input order
    return (
        play.timestamp,
        play.artist_key,
        play.album or "",
        play.title or "",
        play.duration if play.duration is not None else -1,
    )


def process_historical_data(
    events: Iterable[object],
    *,
    store: ProgressStore,
    normalizer: EventNormalizer,
    gateway: ProgressGateway,
    progress_log_interval: int = DEFAULT_PROGRESS_LOG_INTERVAL,
    timer: Callable[[], float] = time.perf_counter,
) -> BatchResult:
    """Reset ``store`` and replay ``events`` oldest first, then save exactly once.

    Malformed records are skipped and counted. A failing save propagates as
    :class:`~playmilestones.domain.errors.PersistenceError`; the run has no partial
    recovery and must be repeated.
    """

    started = timer()
    store.reset()
    normalizer.reset_counters()

    plays: list[NormalizedPlay] = []
    for raw in events:
        play = normalizer.normalize(raw)
        if play is not None:
            plays.append(play)
    plays.sort(key=_replay_order)

    total = len(plays)
    log.info(
        "Processing %s historical tracks (%s rejected)", total, normalizer.rejected
    )

    processed = 0
    for play in plays:
        store.record_play(play)
        processed += 1
        if progress_log_interval > 0 and processed % progress_log_interval == 0:
            elapsed = max(timer() - started, 1e-9)
            log.info(
                "Processed %s/%s tracks (%.1f tracks/sec)", processed, total, processed / elapsed
            )

    gateway.save(store.snapshot())

    result = BatchResult(
        tracks_processed=processed,
        unique_artists=len(store),
        milestones_recorded=len(store.milestones),
        processing_time_seconds=timer() - started,
        events_rejected=normalizer.rejected,
    )
    log.info(
        "Completed %s tracks in %.1fs: %s unique artists, %s milestones",
        result.tracks_processed,
        result.processing_time_seconds,
        result.unique_artists,
        result.milestones_recorded,
    )
    return result


__all__ = ["DEFAULT_PROGRESS_LOG_INTERVAL", "BatchResult", "process_historical_data"]
