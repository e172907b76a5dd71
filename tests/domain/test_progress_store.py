from __future__ import annotations

from typing import TYPE_CHECKING

from playmilestones.domain.types import NormalizedPlay, ProgressSnapshot
from tests.helpers.plays import at_day, feed_store, make_play, repeated_plays

if TYPE_CHECKING:
    from playmilestones.domain.progress import ProgressStore


def test_first_play_creates_progress_lazily(store: ProgressStore) -> None:
    assert store.get("Knox") is None

    feed_store(store, [make_play("Knox", day=3), make_play("Knox", day=5)])

    progress = store.get("Knox")
    assert progress is not None
    assert progress.first_listen_date == at_day(3)
    assert progress.total_plays == 2
    assert len(store) == 1


def test_album_counts_and_first_listen(store: ProgressStore) -> None:
    feed_store(
        store,
        [
            make_play("Knox", day=0),
            make_play("Knox", day=2, album="Early Work"),
            make_play("Knox", day=4, album="Early Work"),
            make_play("Knox", day=5, album="Later Work"),
        ],
    )

    progress = store.get("Knox")
    assert progress is not None
    assert progress.total_plays == 4
    assert progress.album_count == 2
    early = progress.albums["Knox::Early Work"]
    assert early.total_plays == 2
    assert early.first_listen_date == at_day(2)
    assert sum(album.total_plays for album in progress.albums.values()) <= progress.total_plays


def test_equal_album_titles_of_different_artists_stay_apart(store: ProgressStore) -> None:
    feed_store(
        store,
        repeated_plays("Knox", 3, album="Greatest Hits")
        + repeated_plays("blink-182", 2, album="Greatest Hits"),
    )

    knox = store.get("Knox")
    blink = store.get("blink-182")
    assert knox is not None
    assert blink is not None
    assert knox.albums["Knox::Greatest Hits"].total_plays == 3
    assert blink.albums["blink-182::Greatest Hits"].total_plays == 2


def test_milestones_view_is_read_only_copy(store: ProgressStore) -> None:
    feed_store(store, repeated_plays("Knox", 10))

    view = store.milestones

    assert isinstance(view, tuple)
    assert [record.milestone for record in view] == [10]


def test_iteration_tolerates_concurrent_recording(store: ProgressStore) -> None:
    feed_store(store, [make_play("Knox"), make_play("Tycho")])

    seen: list[str] = []
    for index, (artist_key, _progress) in enumerate(store.all()):
        seen.append(artist_key)
        store.record_play(NormalizedPlay(artist_key=f"Late {index}", timestamp=at_day(1)))

    assert seen == ["Knox", "Tycho"]
    assert len(store) == 4


def test_all_can_be_walked_more_than_once(store: ProgressStore) -> None:
    feed_store(store, [make_play("Knox"), make_play("Tycho")])

    entries = store.all()

    assert [key for key, _progress in entries] == ["Knox", "Tycho"]
    assert [key for key, _progress in entries] == ["Knox", "Tycho"]
    assert len(entries) == 2


def test_reset_and_restore(store: ProgressStore) -> None:
    feed_store(store, repeated_plays("Knox", 10))
    snapshot = store.snapshot()

    store.reset()
    assert len(store) == 0
    assert store.milestones == ()
    assert store.snapshot().is_empty

    store.restore(snapshot)
    assert len(store) == 1
    assert [record.milestone for record in store.milestones] == [10]


def test_restore_continues_counting(store: ProgressStore) -> None:
    feed_store(store, repeated_plays("Knox", 9))
    snapshot = store.snapshot()
    store.restore(ProgressSnapshot(artists=snapshot.artists, milestones=snapshot.milestones))

    reached = feed_store(store, [make_play("Knox", day=2)])

    assert [record.milestone for record in reached] == [10]
    assert reached[0].days_since_first_listen == 2
