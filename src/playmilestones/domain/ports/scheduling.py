"""Ports for deferring work to a later point in time."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class TimerHandle(Protocol):
    """A scheduled callback that has not necessarily fired yet."""

    def cancel(self) -> None: ...


@runtime_checkable
class TimerFactory(Protocol):
    """Callable port that runs ``callback`` once after ``delay_seconds``."""

    def __call__(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...


__all__ = ["TimerFactory", "TimerHandle"]
