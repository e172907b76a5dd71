"""Coalescing of rapid write requests into a single deferred write."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from playmilestones.domain.errors import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Callable

    from playmilestones.domain.ports.scheduling import TimerFactory, TimerHandle

DEFAULT_QUIET_PERIOD_SECONDS = 5.0

log = logging.getLogger(__name__)


class CoalescingWriteScheduler:
    """Runs ``write`` once the requests have been quiet for ``quiet_period_seconds``.

    Every :meth:`request` cancels the pending timer and schedules a fresh one, so a burst
    of plays results in exactly one write. A write that raises :class:`PersistenceError`
    is logged and rescheduled for the next quiet period; the in-memory state stays
    authoritative.
    """

    def __init__(
        self,
        write: Callable[[], None],
        *,
        timer_factory: TimerFactory,
        quiet_period_seconds: float = DEFAULT_QUIET_PERIOD_SECONDS,
    ) -> None:
        if quiet_period_seconds < 0:
            raise ValueError("Quiet period must be non-negative")
        self._write = write
        self._timer_factory = timer_factory
        self.quiet_period_seconds = quiet_period_seconds
        self._lock = threading.Lock()
        self._pending: TimerHandle | None = None
        self._generation = 0
        self.writes = 0
        self.failures = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self._timer_factory(
                self.quiet_period_seconds, lambda: self._fire(generation)
            )

    def flush(self) -> None:
        """Write immediately if a write is pending; failures propagate to the caller."""

        with self._lock:
            if self._pending is None:
                return
            self._pending.cancel()
            self._pending = None
        self._write()
        self.writes += 1

    def cancel(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a timer that fired while being replaced or cancelled is stale
            if generation != self._generation or self._pending is None:
                return
            self._pending = None
        try:
            self._write()
        except PersistenceError:
            self.failures += 1
            log.exception("Deferred write failed; retrying after the next quiet period")
            self.request()
            return
        self.writes += 1


__all__ = ["DEFAULT_QUIET_PERIOD_SECONDS", "CoalescingWriteScheduler"]
