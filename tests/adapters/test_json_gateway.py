from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from playmilestones.adapters.json_files import JsonFileProgressGateway
from playmilestones.domain.errors import PersistenceError
from playmilestones.domain.progress import ProgressStore
from tests.helpers.gateways import dump_snapshot
from tests.helpers.plays import feed_store, plays_on_days, repeated_plays

if TYPE_CHECKING:
    from pathlib import Path


def _gateway(directory: Path) -> JsonFileProgressGateway:
    return JsonFileProgressGateway(
        directory / "artist-progress.json", directory / "artist-milestones.json"
    )


def _populated_store() -> ProgressStore:
    store = ProgressStore()
    feed_store(
        store,
        plays_on_days("Knox", [0] + [1] * 48 + [40], album="Early Work")
        + repeated_plays("Tycho", 3, day=2),
    )
    return store


def test_missing_files_load_as_empty_state(tmp_path: Path) -> None:
    snapshot = _gateway(tmp_path / "nowhere").load()

    assert snapshot.is_empty


def test_save_then_load_restores_state(tmp_path: Path) -> None:
    store = _populated_store()
    gateway = _gateway(tmp_path)

    gateway.save(store.snapshot())
    loaded = gateway.load()

    assert dump_snapshot(loaded) == dump_snapshot(store.snapshot())
    assert sorted(path.name for path in tmp_path.iterdir()) == [
        "artist-milestones.json",
        "artist-progress.json",
    ]


def test_documents_use_camel_case_layout(tmp_path: Path) -> None:
    _gateway(tmp_path).save(_populated_store().snapshot())

    progress = json.loads((tmp_path / "artist-progress.json").read_text(encoding="utf-8"))
    milestones = json.loads((tmp_path / "artist-milestones.json").read_text(encoding="utf-8"))

    knox = progress["Knox"]
    assert knox["totalPlays"] == 50
    assert knox["metrics"]["daysToFiftyPlays"] == 40
    assert knox["albums"]["Knox::Early Work"]["title"] == "Early Work"
    assert [item["milestone"] for item in milestones] == [10, 25, 50]
    assert milestones[-1]["daysSinceFirstListen"] == 40
    assert milestones[-1]["playRate"] == pytest.approx(1.25)


def test_load_accepts_hand_written_documents(tmp_path: Path) -> None:
    (tmp_path / "artist-progress.json").write_text(
        json.dumps(
            {
                "Knox": {
                    "firstListenDate": 1_700_000_000_000,
                    "totalPlays": 12,
                    "albums": {},
                    "milestones": [],
                    "metrics": {"daysToTenPlays": 4, "playRate": 1.5, "legacyField": True},
                }
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "artist-milestones.json").write_text(
        json.dumps(
            [
                {
                    "artist": "Knox",
                    "album": "",
                    "milestone": 10,
                    "reachedAt": 1_700_000_400_000,
                    "daysSinceFirstListen": 4,
                    "playRate": 2.5,
                }
            ]
        ),
        encoding="utf-8",
    )

    snapshot = _gateway(tmp_path).load()

    knox = snapshot.artists["Knox"]
    assert knox.total_plays == 12
    assert knox.metrics.days_to_ten_plays == 4
    assert knox.metrics.days_to_fifty_plays is None
    assert snapshot.milestones[0].album is None


def test_malformed_document_raises_persistence_error(tmp_path: Path) -> None:
    (tmp_path / "artist-progress.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        _gateway(tmp_path).load()


def test_invalid_document_shape_raises_persistence_error(tmp_path: Path) -> None:
    (tmp_path / "artist-milestones.json").write_text('{"artist": "Knox"}', encoding="utf-8")

    with pytest.raises(PersistenceError):
        _gateway(tmp_path).load()


def test_unwritable_location_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(PersistenceError):
        _gateway(blocker / "data").save(_populated_store().snapshot())
