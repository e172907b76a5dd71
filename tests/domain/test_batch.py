from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

import pytest

from playmilestones.domain.batch import BatchResult, process_historical_data
from playmilestones.domain.errors import PersistenceError
from playmilestones.domain.types import ALBUM_MILESTONE_THRESHOLDS, ARTIST_MILESTONE_THRESHOLDS
from tests.helpers.gateways import FailingProgressGateway, InMemoryProgressGateway
from tests.helpers.plays import make_play, plays_on_days, repeated_plays

if TYPE_CHECKING:
    from playmilestones.domain.normalization import EventNormalizer
    from playmilestones.domain.progress import ProgressStore
    from tests.helpers.plays import RawPlay


def _corpus() -> list[RawPlay]:
    records = plays_on_days("Knox", range(60), album="Early Work")
    records += repeated_plays("blink 182", 30, day=5)
    records += repeated_plays("Blink-182", 25, day=9, album="Enema of the State")
    # equal timestamps across artists and albums
    records += [make_play("Tycho", day=2, album="Dive"), make_play("Bonobo", day=2, album="Dive")]
    records += [make_play("Tycho", day=2, album="Awake"), make_play("Tycho", day=2)]
    return records


def test_batch_rebuilds_store_and_saves_once(
    store: ProgressStore, normalizer: EventNormalizer
) -> None:
    gateway = InMemoryProgressGateway()

    result = process_historical_data(
        _corpus(), store=store, normalizer=normalizer, gateway=gateway
    )

    assert len(gateway.saved) == 1
    assert result.tracks_processed == 119
    assert result.unique_artists == 4
    assert result.events_rejected == 0
    blink = store.get("blink-182")
    assert blink is not None
    assert blink.total_plays == 55
    assert result.milestones_recorded == len(store.milestones)
    assert [record.milestone for record in blink.milestones] == [10, 25, 50]


def test_batch_discards_previous_state(store: ProgressStore, normalizer: EventNormalizer) -> None:
    gateway = InMemoryProgressGateway()
    process_historical_data(
        repeated_plays("Stale", 12), store=store, normalizer=normalizer, gateway=gateway
    )

    result = process_historical_data(
        repeated_plays("Knox", 3), store=store, normalizer=normalizer, gateway=gateway
    )

    assert store.get("Stale") is None
    assert result.unique_artists == 1
    assert store.milestones == ()


def test_batch_is_idempotent(store: ProgressStore, normalizer: EventNormalizer) -> None:
    gateway = InMemoryProgressGateway()

    first = process_historical_data(_corpus(), store=store, normalizer=normalizer, gateway=gateway)
    second = process_historical_data(
        _corpus(), store=store, normalizer=normalizer, gateway=gateway
    )

    assert gateway.saved[0] == gateway.saved[1]
    assert first.milestones_recorded == second.milestones_recorded


def test_batch_output_does_not_depend_on_input_order(
    store: ProgressStore, normalizer: EventNormalizer
) -> None:
    gateway = InMemoryProgressGateway()
    shuffled = _corpus()
    random.Random(182).shuffle(shuffled)

    process_historical_data(_corpus(), store=store, normalizer=normalizer, gateway=gateway)
    process_historical_data(shuffled, store=store, normalizer=normalizer, gateway=gateway)
    process_historical_data(
        list(reversed(_corpus())), store=store, normalizer=normalizer, gateway=gateway
    )

    assert gateway.saved[0] == gateway.saved[1] == gateway.saved[2]


def test_batch_counts_rejected_records(store: ProgressStore, normalizer: EventNormalizer) -> None:
    records: list[object] = [
        *repeated_plays("Knox", 3),
        {"artist": "", "timestamp": 1},
        {"artist": "Knox", "timestamp": "later"},
        {"title": "No artist"},
    ]

    result = process_historical_data(
        records,  # type: ignore[arg-type]
        store=store,
        normalizer=normalizer,
        gateway=InMemoryProgressGateway(),
    )

    assert result.tracks_processed == 3
    assert result.events_rejected == 3


def test_batch_rejection_counter_resets_per_run(
    store: ProgressStore, normalizer: EventNormalizer
) -> None:
    gateway = InMemoryProgressGateway()
    process_historical_data(
        [{"artist": "Knox"}], store=store, normalizer=normalizer, gateway=gateway
    )

    result = process_historical_data(
        repeated_plays("Knox", 1), store=store, normalizer=normalizer, gateway=gateway
    )

    assert result.events_rejected == 0


def test_batch_save_failure_propagates(store: ProgressStore, normalizer: EventNormalizer) -> None:
    with pytest.raises(PersistenceError):
        process_historical_data(
            repeated_plays("Knox", 3),
            store=store,
            normalizer=normalizer,
            gateway=FailingProgressGateway(),
        )


def test_batch_logs_progress_at_interval(
    store: ProgressStore,
    normalizer: EventNormalizer,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="playmilestones.domain.batch")

    process_historical_data(
        repeated_plays("Knox", 12),
        store=store,
        normalizer=normalizer,
        gateway=InMemoryProgressGateway(),
        progress_log_interval=5,
    )

    messages = [record.getMessage() for record in caplog.records]
    progress_lines = [message for message in messages if message.startswith("Processed")]
    assert len(progress_lines) == 2
    assert progress_lines[0].startswith("Processed 5/12 tracks")


def test_batch_result_to_dict() -> None:
    result = BatchResult(
        tracks_processed=10,
        unique_artists=2,
        milestones_recorded=1,
        processing_time_seconds=0.5,
        events_rejected=3,
    )

    assert result.to_dict() == {
        "tracksProcessed": 10,
        "uniqueArtists": 2,
        "milestonesRecorded": 1,
        "processingTime": 0.5,
        "eventsRejected": 3,
    }


def _large_corpus(size: int = 10_000) -> list[RawPlay]:
    rng = random.Random(2024)
    artists = [f"Artist {index:02d}" for index in range(40)]
    albums = [None, "Singles", "Debut", "Live"]
    return [
        make_play(
            rng.choice(artists),
            day=rng.uniform(0, 365),
            album=rng.choice(albums),
        )
        for _ in range(size)
    ]


def test_large_corpus_rebuild_is_repeatable(
    store: ProgressStore, normalizer: EventNormalizer
) -> None:
    corpus = _large_corpus()
    gateway = InMemoryProgressGateway()

    first = process_historical_data(corpus, store=store, normalizer=normalizer, gateway=gateway)
    second = process_historical_data(corpus, store=store, normalizer=normalizer, gateway=gateway)

    assert first.tracks_processed == 10_000
    assert first.milestones_recorded == second.milestones_recorded
    assert gateway.saved[0] == gateway.saved[1]


def test_rebuilt_milestones_match_final_counts(
    store: ProgressStore, normalizer: EventNormalizer
) -> None:
    process_historical_data(
        _large_corpus(), store=store, normalizer=normalizer, gateway=InMemoryProgressGateway()
    )

    for _artist_key, progress in store.all():
        thresholds = [record.milestone for record in progress.milestones]
        assert thresholds == [t for t in ARTIST_MILESTONE_THRESHOLDS if t <= progress.total_plays]
        days = [record.days_since_first_listen for record in progress.milestones]
        assert all(day >= 1 for day in days)
        assert days == sorted(days)
        assert progress.metrics.acceleration_rate is not None
        for album in progress.albums.values():
            album_thresholds = [record.milestone for record in album.milestones]
            assert album_thresholds == [
                t for t in ALBUM_MILESTONE_THRESHOLDS if t <= album.total_plays
            ]
