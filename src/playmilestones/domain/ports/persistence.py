"""Ports for persisting tracker state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from playmilestones.domain.types import (
        ArtistKey,
        ArtistProgress,
        MilestoneRecord,
        ProgressSnapshot,
    )


@runtime_checkable
class ProgressGateway(Protocol):
    """Loads and saves the progress collection and the flat milestone list.

    Implementations raise :class:`playmilestones.domain.errors.PersistenceError` when the
    underlying medium fails. Loading from a medium that holds nothing yet returns an
    empty snapshot.
    """

    def load(self) -> ProgressSnapshot: ...

    def save(self, snapshot: ProgressSnapshot) -> None: ...


@runtime_checkable
class ArtistProgressRepository(Protocol):
    """Persistence contract for per-artist progress documents."""

    def load_all(self) -> dict[ArtistKey, ArtistProgress]: ...

    def replace_all(self, artists: Mapping[ArtistKey, ArtistProgress]) -> None: ...


@runtime_checkable
class MilestoneRepository(Protocol):
    """Persistence contract for the ordered global milestone list."""

    def load_all(self) -> list[MilestoneRecord]: ...

    def replace_all(self, milestones: Iterable[MilestoneRecord]) -> None: ...


__all__ = ["ArtistProgressRepository", "MilestoneRepository", "ProgressGateway"]
