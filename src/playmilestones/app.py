"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from playmilestones.adapters.history_files import load_history
from playmilestones.adapters.json_files import JsonFileProgressGateway
from playmilestones.adapters.sqlalchemy.gateway import SqlAlchemyProgressGateway
from playmilestones.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyProgressUnitOfWork,
    is_started,
    startup,
)
from playmilestones.adapters.timers import threading_timer
from playmilestones.config import (
    StorageBackend,
    get_persistence_config,
    get_tracker_config,
)
from playmilestones.domain.tracker import MilestoneTracker

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from playmilestones.config import PersistenceConfig, TrackerConfig
    from playmilestones.domain.batch import BatchResult
    from playmilestones.domain.ports.persistence import ProgressGateway
    from playmilestones.domain.ports.scheduling import TimerFactory


log = getLogger(__name__)


def build_gateway(persistence: PersistenceConfig | None = None) -> ProgressGateway:
    """Return the progress gateway selected by ``PLAYMILESTONES_BACKEND``."""

    config = persistence or get_persistence_config()
    if config.backend is StorageBackend.SQLALCHEMY:
        if not is_started():
            startup(database_uri=config.database_uri)
        log.debug("Using SQLAlchemy persistence at %s", config.database_uri)
        return SqlAlchemyProgressGateway(SqlAlchemyProgressUnitOfWork)
    log.debug("Using JSON persistence in %s", config.storage.resolve_data_dir())
    return JsonFileProgressGateway(
        config.storage.progress_path(),
        config.storage.milestones_path(),
    )


def build_tracker(
    *,
    gateway: ProgressGateway | None = None,
    tracker_config: TrackerConfig | None = None,
    timer_factory: TimerFactory = threading_timer,
) -> MilestoneTracker:
    """Compose a tracker from configuration; nothing is loaded until first use."""

    config = tracker_config or get_tracker_config()
    return MilestoneTracker(
        gateway or build_gateway(),
        timer_factory=timer_factory,
        quiet_period_seconds=config.debounce_seconds,
        progress_log_interval=config.progress_log_interval,
    )


def process_history_files(
    data_dir: Path | None = None,
    *,
    extra_files: Sequence[Path] = (),
    tracker: MilestoneTracker | None = None,
) -> BatchResult:
    """Rebuild all progress from the listening-history files and persist it once."""

    effective_tracker = tracker or build_tracker()
    if data_dir is None and not extra_files:
        data_dir = get_persistence_config().storage.resolve_data_dir()
    corpus = load_history(data_dir, extra_files=extra_files)
    if not corpus.files_loaded:
        log.warning("No listening history files found in %s", data_dir)

    result = effective_tracker.process_historical_data(corpus.records)

    log.info(
        f"Finished historical processing: tracks={result.tracks_processed}, "
        f"artists={result.unique_artists}, milestones={result.milestones_recorded}, "
        f"rejected={result.events_rejected}"
    )
    return result


__all__ = ["build_gateway", "build_tracker", "process_history_files"]
