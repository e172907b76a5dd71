from __future__ import annotations

import threading

from playmilestones.adapters.timers import threading_timer


def test_threading_timer_runs_callback() -> None:
    fired = threading.Event()

    timer = threading_timer(0.01, fired.set)

    assert fired.wait(timeout=5)
    assert timer.daemon


def test_threading_timer_can_be_cancelled() -> None:
    fired = threading.Event()

    timer = threading_timer(10.0, fired.set)
    timer.cancel()
    timer.join(timeout=5)

    assert not fired.is_set()
