"""Domain error definitions."""

from __future__ import annotations


class PersistenceError(RuntimeError):
    """Raised by persistence gateways when progress cannot be loaded or saved."""


class UnknownLeaderboardMetricError(ValueError):
    """Raised when a leaderboard is requested for a metric that does not exist."""

    def __init__(self, metric: str, *, supported: tuple[str, ...]) -> None:
        super().__init__(
            f"Unknown leaderboard metric {metric!r}; expected one of {', '.join(supported)}"
        )
        self.metric = metric
        self.supported = supported
