"""Translate between persisted documents and domain progress records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from playmilestones.domain.types import (
    AlbumMetrics,
    AlbumProgress,
    ArtistMetrics,
    ArtistProgress,
    MilestoneRecord,
    ProgressSnapshot,
)

from .schema import (
    AlbumMetricsPayload,
    AlbumProgressPayload,
    ArtistMetricsPayload,
    ArtistProgressPayload,
    MilestoneDocument,
    MilestonePayload,
    ProgressDocument,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


def milestone_to_payload(record: MilestoneRecord) -> MilestonePayload:
    return MilestonePayload(
        artist=record.artist,
        album=record.album,
        milestone=record.milestone,
        reached_at=record.reached_at,
        days_since_first_listen=record.days_since_first_listen,
        play_rate=record.play_rate,
    )


def milestone_from_payload(payload: MilestonePayload) -> MilestoneRecord:
    return MilestoneRecord(
        artist=payload.artist,
        album=payload.album,
        milestone=payload.milestone,
        reached_at=payload.reached_at,
        days_since_first_listen=payload.days_since_first_listen,
        play_rate=payload.play_rate,
    )


def _album_to_payload(album: AlbumProgress) -> AlbumProgressPayload:
    metrics = album.metrics
    return AlbumProgressPayload(
        title=album.title,
        first_listen_date=album.first_listen_date,
        total_plays=album.total_plays,
        milestones=[milestone_to_payload(record) for record in album.milestones],
        metrics=AlbumMetricsPayload(
            days_to_ten_plays=metrics.days_to_ten_plays,
            days_to_fifty_plays=metrics.days_to_fifty_plays,
            play_rate=metrics.play_rate,
        ),
    )


def _album_from_payload(payload: AlbumProgressPayload) -> AlbumProgress:
    metrics = payload.metrics
    return AlbumProgress(
        title=payload.title,
        first_listen_date=payload.first_listen_date,
        total_plays=payload.total_plays,
        milestones=[milestone_from_payload(item) for item in payload.milestones],
        metrics=AlbumMetrics(
            days_to_ten_plays=metrics.days_to_ten_plays,
            days_to_fifty_plays=metrics.days_to_fifty_plays,
            play_rate=metrics.play_rate,
        ),
    )


def artist_to_payload(progress: ArtistProgress) -> ArtistProgressPayload:
    metrics = progress.metrics
    return ArtistProgressPayload(
        first_listen_date=progress.first_listen_date,
        total_plays=progress.total_plays,
        albums={key: _album_to_payload(album) for key, album in progress.albums.items()},
        milestones=[milestone_to_payload(record) for record in progress.milestones],
        metrics=ArtistMetricsPayload(
            days_to_ten_plays=metrics.days_to_ten_plays,
            days_to_fifty_plays=metrics.days_to_fifty_plays,
            days_to_hundred_plays=metrics.days_to_hundred_plays,
            play_rate=metrics.play_rate,
            acceleration_rate=metrics.acceleration_rate,
        ),
    )


def artist_from_payload(payload: ArtistProgressPayload) -> ArtistProgress:
    metrics = payload.metrics
    return ArtistProgress(
        first_listen_date=payload.first_listen_date,
        total_plays=payload.total_plays,
        albums={key: _album_from_payload(album) for key, album in payload.albums.items()},
        milestones=[milestone_from_payload(item) for item in payload.milestones],
        metrics=ArtistMetrics(
            days_to_ten_plays=metrics.days_to_ten_plays,
            days_to_fifty_plays=metrics.days_to_fifty_plays,
            days_to_hundred_plays=metrics.days_to_hundred_plays,
            play_rate=metrics.play_rate,
            acceleration_rate=metrics.acceleration_rate,
        ),
    )


def snapshot_to_documents(snapshot: ProgressSnapshot) -> tuple[ProgressDocument, MilestoneDocument]:
    progress = ProgressDocument(
        {key: artist_to_payload(artist) for key, artist in snapshot.artists.items()}
    )
    milestones = MilestoneDocument([milestone_to_payload(m) for m in snapshot.milestones])
    return progress, milestones


def snapshot_from_documents(
    progress: ProgressDocument | None,
    milestones: MilestoneDocument | Iterable[MilestonePayload] | None,
) -> ProgressSnapshot:
    artists = (
        {key: artist_from_payload(payload) for key, payload in progress.root.items()}
        if progress is not None
        else {}
    )
    if isinstance(milestones, MilestoneDocument):
        milestone_payloads: Iterable[MilestonePayload] = milestones.root
    else:
        milestone_payloads = milestones or ()
    return ProgressSnapshot(
        artists=artists,
        milestones=[milestone_from_payload(item) for item in milestone_payloads],
    )


__all__ = [
    "artist_from_payload",
    "artist_to_payload",
    "milestone_from_payload",
    "milestone_to_payload",
    "snapshot_from_documents",
    "snapshot_to_documents",
]
