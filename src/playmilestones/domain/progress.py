"""In-memory owner of all artist and album progress."""

from __future__ import annotations

from typing import TYPE_CHECKING

from playmilestones.domain.metrics import update_album_metrics, update_artist_metrics
from playmilestones.domain.milestones import check_album_milestones, check_artist_milestones
from playmilestones.domain.types import (
    AlbumProgress,
    ArtistProgress,
    MilestoneRecord,
    ProgressSnapshot,
)

if TYPE_CHECKING:
    from playmilestones.domain.types import ArtistKey, NormalizedPlay


class ProgressStore:
    """Sole owner of :class:`ArtistProgress` records and the global milestone list.

    The store never persists anything itself; callers decide when to take a
    :meth:`snapshot` and hand it to a gateway.
    """

    def __init__(self) -> None:
        self._artists: dict[ArtistKey, ArtistProgress] = {}
        self._milestones: list[MilestoneRecord] = []

    def record_play(self, play: NormalizedPlay) -> list[MilestoneRecord]:
        """Apply one play and return the artist milestones it produced."""

        artist = self._artists.get(play.artist_key)
        if artist is None:
            artist = ArtistProgress(first_listen_date=play.timestamp)
            self._artists[play.artist_key] = artist

        album: AlbumProgress | None = None
        album_key = play.album_key
        if album_key is not None and play.album is not None:
            album = artist.albums.get(album_key)
            if album is None:
                album = AlbumProgress(title=play.album, first_listen_date=play.timestamp)
                artist.albums[album_key] = album

        artist.total_plays += 1
        if album is not None:
            album.total_plays += 1

        reached = check_artist_milestones(play.artist_key, artist, play.timestamp)
        self._milestones.extend(reached)
        if album is not None:
            check_album_milestones(play.artist_key, album, play.timestamp)

        update_artist_metrics(artist, play.timestamp)
        if album is not None:
            update_album_metrics(album, play.timestamp)

        return reached

    def get(self, artist_key: ArtistKey) -> ArtistProgress | None:
        return self._artists.get(artist_key)

    def all(self) -> list[tuple[ArtistKey, ArtistProgress]]:
        return list(self._artists.items())

    def __len__(self) -> int:
        return len(self._artists)

    @property
    def milestones(self) -> tuple[MilestoneRecord, ...]:
        return tuple(self._milestones)

    def reset(self) -> None:
        self._artists = {}
        self._milestones = []

    def snapshot(self) -> ProgressSnapshot:
        """Return the current state; the progress records are shared, not copied."""

        return ProgressSnapshot(artists=dict(self._artists), milestones=list(self._milestones))

    def restore(self, snapshot: ProgressSnapshot) -> None:
        self._artists = dict(snapshot.artists)
        self._milestones = list(snapshot.milestones)


__all__ = ["ProgressStore"]
