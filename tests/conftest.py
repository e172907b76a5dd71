from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from playmilestones.adapters.sqlalchemy.mappings import create_all_tables
from playmilestones.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyProgressUnitOfWork,
    shutdown,
    startup,
)
from playmilestones.domain.clock import fixed_clock
from playmilestones.domain.normalization import EventNormalizer
from playmilestones.domain.progress import ProgressStore
from playmilestones.domain.queries import QueryEngine
from playmilestones.domain.tracker import MilestoneTracker
from tests.helpers.gateways import InMemoryProgressGateway
from tests.helpers.plays import at_day
from tests.helpers.timers import ManualTimers

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    for name in (
        "PLAYMILESTONES_BACKEND",
        "PLAYMILESTONES_DEBOUNCE_SECONDS",
        "PLAYMILESTONES_PROGRESS_LOG_INTERVAL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PLAYMILESTONES_DATA_DIR", str(tmp_path_factory.mktemp("data")))


@pytest.fixture
def normalizer() -> EventNormalizer:
    return EventNormalizer()


@pytest.fixture
def store() -> ProgressStore:
    return ProgressStore()


@pytest.fixture
def query_engine(store: ProgressStore) -> QueryEngine:
    return QueryEngine(store, clock=fixed_clock(at_day(100)))


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def memory_gateway() -> InMemoryProgressGateway:
    return InMemoryProgressGateway()


@pytest.fixture
def tracker(memory_gateway: InMemoryProgressGateway, timers: ManualTimers) -> MilestoneTracker:
    return MilestoneTracker(
        memory_gateway,
        timer_factory=timers,
        clock=fixed_clock(at_day(100)),
        quiet_period_seconds=5.0,
    )


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:")
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyProgressUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyProgressUnitOfWork:
        return SqlAlchemyProgressUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
