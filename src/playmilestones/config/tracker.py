"""Tracker timing defaults."""

from __future__ import annotations

from dataclasses import dataclass

from playmilestones.domain.batch import DEFAULT_PROGRESS_LOG_INTERVAL
from playmilestones.domain.scheduling import DEFAULT_QUIET_PERIOD_SECONDS

from .env import env_float, env_int


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    debounce_seconds: float = DEFAULT_QUIET_PERIOD_SECONDS
    progress_log_interval: int = DEFAULT_PROGRESS_LOG_INTERVAL


def get_tracker_config() -> TrackerConfig:
    return TrackerConfig(
        debounce_seconds=env_float(
            "PLAYMILESTONES_DEBOUNCE_SECONDS", DEFAULT_QUIET_PERIOD_SECONDS
        ),
        progress_log_interval=env_int(
            "PLAYMILESTONES_PROGRESS_LOG_INTERVAL", DEFAULT_PROGRESS_LOG_INTERVAL
        ),
    )
