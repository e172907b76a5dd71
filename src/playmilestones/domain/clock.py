"""Injectable wall clock for queries that compare against "now"."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from playmilestones.domain.types import EpochMillis


class Clock(Protocol):
    def __call__(self) -> EpochMillis: ...


def system_clock() -> EpochMillis:
    return int(time.time() * 1000)


def fixed_clock(now: EpochMillis) -> Clock:
    def _clock() -> EpochMillis:
        return now

    return _clock


__all__ = ["Clock", "fixed_clock", "system_clock"]
