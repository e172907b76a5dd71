"""Application service tying normalization, progress, persistence and queries together."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from playmilestones.domain.batch import (
    DEFAULT_PROGRESS_LOG_INTERVAL,
    BatchResult,
    process_historical_data,
)
from playmilestones.domain.clock import system_clock
from playmilestones.domain.errors import PersistenceError
from playmilestones.domain.normalization import EventNormalizer
from playmilestones.domain.progress import ProgressStore
from playmilestones.domain.queries import DEFAULT_LEADERBOARD_LIMIT, LeaderboardMetric, QueryEngine
from playmilestones.domain.scheduling import DEFAULT_QUIET_PERIOD_SECONDS, CoalescingWriteScheduler
from playmilestones.domain.types import TrackerMode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from playmilestones.domain.clock import Clock
    from playmilestones.domain.normalization import RawPlayRecord
    from playmilestones.domain.ports.persistence import ProgressGateway
    from playmilestones.domain.ports.scheduling import TimerFactory
    from playmilestones.domain.queries import (
        AlbumComparison,
        Award,
        Comparison,
        GrowthTrajectory,
        LeaderboardPage,
    )
    from playmilestones.domain.types import MilestoneRecord

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackerStatus:
    initialized: bool
    has_data: bool
    artist_count: int
    milestone_count: int
    mode: TrackerMode
    rejected_events: int
    write_pending: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "initialized": self.initialized,
            "hasData": self.has_data,
            "artistCount": self.artist_count,
            "milestoneCount": self.milestone_count,
            "mode": self.mode.value,
            "rejectedEvents": self.rejected_events,
            "writePending": self.write_pending,
        }


class MilestoneTracker:
    """Owns the progress store for the lifetime of the host process.

    Two modes exist. In streaming mode every accepted play mutates the store and asks the
    write scheduler for a deferred save. In batch mode the store is rebuilt from scratch and
    saved once; there is no partial mode.
    """

    def __init__(
        self,
        gateway: ProgressGateway,
        *,
        timer_factory: TimerFactory,
        normalizer: EventNormalizer | None = None,
        clock: Clock = system_clock,
        quiet_period_seconds: float = DEFAULT_QUIET_PERIOD_SECONDS,
        progress_log_interval: int = DEFAULT_PROGRESS_LOG_INTERVAL,
    ) -> None:
        self._gateway = gateway
        self._lock = threading.RLock()
        self.normalizer = normalizer or EventNormalizer()
        self.store = ProgressStore()
        self.queries = QueryEngine(self.store, aliases=self.normalizer.aliases, clock=clock)
        self.progress_log_interval = progress_log_interval
        self.scheduler = CoalescingWriteScheduler(
            self._save,
            timer_factory=timer_factory,
            quiet_period_seconds=quiet_period_seconds,
        )
        self.mode = TrackerMode.STREAMING
        self.initialized = False

    def initialize(self) -> None:
        """Load persisted state once; an unreadable store starts the tracker empty."""

        with self._lock:
            if self.initialized:
                return
            try:
                snapshot = self._gateway.load()
            except PersistenceError:
                log.exception("Could not load persisted progress; starting empty")
                self.store.reset()
            else:
                self.store.restore(snapshot)
            self.initialized = True
            log.info("Initialized with %s artists", len(self.store))

    def track_play(self, raw: RawPlayRecord) -> list[MilestoneRecord]:
        """Streaming entry point: apply one play and schedule a deferred save."""

        self.initialize()
        play = self.normalizer.normalize(raw)
        if play is None:
            return []
        with self._lock:
            reached = self.store.record_play(play)
        self.scheduler.request()
        return reached

    def process_historical_data(self, events: Iterable[object]) -> BatchResult:
        """Batch entry point: rebuild everything from ``events`` and save once.

        Raises :class:`PersistenceError` when the final save fails.
        """

        with self._lock:
            self.scheduler.cancel()
            self.mode = TrackerMode.BATCH
            try:
                result = process_historical_data(
                    events,
                    store=self.store,
                    normalizer=self.normalizer,
                    gateway=self._gateway,
                    progress_log_interval=self.progress_log_interval,
                )
            finally:
                self.mode = TrackerMode.STREAMING
            self.initialized = True
        return result

    def flush(self) -> None:
        """Save now if a deferred write is pending."""

        self.scheduler.flush()

    def close(self) -> None:
        self.flush()

    def status(self) -> TrackerStatus:
        artist_count = len(self.store)
        return TrackerStatus(
            initialized=self.initialized,
            has_data=artist_count > 0,
            artist_count=artist_count,
            milestone_count=len(self.store.milestones),
            mode=self.mode,
            rejected_events=self.normalizer.rejected,
            write_pending=self.scheduler.pending,
        )

    def all_milestones(self) -> tuple[MilestoneRecord, ...]:
        return self.store.milestones

    def compare(self, artist_names: Iterable[str]) -> Comparison:
        return self.queries.compare(artist_names)

    def album_comparison(self, artist_name: str) -> AlbumComparison | None:
        return self.queries.album_comparison(artist_name)

    def growth_trajectory(self, artist_name: str) -> GrowthTrajectory | None:
        return self.queries.growth_trajectory(artist_name)

    def leaderboard(
        self,
        metric: str | LeaderboardMetric = LeaderboardMetric.TOTAL_PLAYS,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
        offset: int = 0,
    ) -> LeaderboardPage:
        return self.queries.leaderboard(metric, limit, offset)

    def awards(self) -> list[Award]:
        return self.queries.awards()

    def _save(self) -> None:
        with self._lock:
            self._gateway.save(self.store.snapshot())


__all__ = ["MilestoneTracker", "TrackerStatus"]
