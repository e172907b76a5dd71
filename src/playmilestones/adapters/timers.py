"""Wall-clock timers for the coalescing write scheduler."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def threading_timer(delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
    """Start a daemon :class:`threading.Timer` running ``callback`` after ``delay_seconds``."""

    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


if TYPE_CHECKING:
    from playmilestones.domain.ports.scheduling import TimerFactory

    _timer_factory_check: TimerFactory = threading_timer


__all__ = ["threading_timer"]
