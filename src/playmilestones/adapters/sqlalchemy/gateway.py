"""Progress gateway persisting tracker state through a SQLAlchemy unit of work."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from playmilestones.domain.errors import PersistenceError
from playmilestones.domain.types import ProgressSnapshot

if TYPE_CHECKING:
    from collections.abc import Callable

    from playmilestones.domain.ports.unit_of_work import ProgressUnitOfWork

log = logging.getLogger(__name__)


class SqlAlchemyProgressGateway:
    """Loads and replaces the whole persisted state inside one transaction."""

    def __init__(self, uow_factory: Callable[[], ProgressUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def load(self) -> ProgressSnapshot:
        try:
            with self._uow_factory() as uow:
                artists = uow.repositories.artists.load_all()
                milestones = uow.repositories.milestones.load_all()
        except (SQLAlchemyError, ValidationError) as exc:
            raise PersistenceError(f"Failed to load progress from database: {exc}") from exc
        log.debug("Loaded %s artists and %s milestones", len(artists), len(milestones))
        return ProgressSnapshot(artists=artists, milestones=milestones)

    def save(self, snapshot: ProgressSnapshot) -> None:
        try:
            with self._uow_factory() as uow:
                uow.repositories.artists.replace_all(snapshot.artists)
                uow.repositories.milestones.replace_all(snapshot.milestones)
                uow.commit()
        except (SQLAlchemyError, ValidationError) as exc:
            raise PersistenceError(f"Failed to save progress to database: {exc}") from exc
        log.debug(
            "Saved %s artists and %s milestones",
            len(snapshot.artists),
            len(snapshot.milestones),
        )


if TYPE_CHECKING:
    from playmilestones.adapters.sqlalchemy.unit_of_work import SqlAlchemyProgressUnitOfWork
    from playmilestones.domain.ports.persistence import ProgressGateway

    _gateway_check: ProgressGateway = SqlAlchemyProgressGateway(SqlAlchemyProgressUnitOfWork)


__all__ = ["SqlAlchemyProgressGateway"]
