"""Pydantic models describing the persisted progress and milestone documents.

Field aliases keep the camelCase layout of ``artist-progress.json`` and
``artist-milestones.json`` so existing data files stay readable.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class DocumentBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MilestonePayload(DocumentBaseModel):
    artist: str
    album: str | None = None
    milestone: int
    reached_at: int = Field(alias="reachedAt")
    days_since_first_listen: int = Field(alias="daysSinceFirstListen", ge=1)
    play_rate: float = Field(alias="playRate")

    _normalize_album = field_validator("album", mode="before")(_blank_to_none)


class ArtistMetricsPayload(DocumentBaseModel):
    days_to_ten_plays: int | None = Field(default=None, alias="daysToTenPlays")
    days_to_fifty_plays: int | None = Field(default=None, alias="daysToFiftyPlays")
    days_to_hundred_plays: int | None = Field(default=None, alias="daysToHundredPlays")
    play_rate: float | None = Field(default=None, alias="playRate")
    acceleration_rate: float | None = Field(default=None, alias="accelerationRate")


class AlbumMetricsPayload(DocumentBaseModel):
    days_to_ten_plays: int | None = Field(default=None, alias="daysToTenPlays")
    days_to_fifty_plays: int | None = Field(default=None, alias="daysToFiftyPlays")
    play_rate: float | None = Field(default=None, alias="playRate")


class AlbumProgressPayload(DocumentBaseModel):
    title: str
    first_listen_date: int = Field(alias="firstListenDate")
    total_plays: int = Field(default=0, alias="totalPlays", ge=0)
    milestones: list[MilestonePayload] = Field(default_factory=list[MilestonePayload])
    metrics: AlbumMetricsPayload = Field(default_factory=AlbumMetricsPayload)


class ArtistProgressPayload(DocumentBaseModel):
    first_listen_date: int = Field(alias="firstListenDate")
    total_plays: int = Field(default=0, alias="totalPlays", ge=0)
    albums: dict[str, AlbumProgressPayload] = Field(
        default_factory=dict[str, AlbumProgressPayload]
    )
    milestones: list[MilestonePayload] = Field(default_factory=list[MilestonePayload])
    metrics: ArtistMetricsPayload = Field(default_factory=ArtistMetricsPayload)


class ProgressDocument(RootModel[dict[str, ArtistProgressPayload]]):
    """``artist-progress.json``: progress keyed by canonical artist name."""


class MilestoneDocument(RootModel[list[MilestonePayload]]):
    """``artist-milestones.json``: the flat, append-only milestone list."""


__all__ = [
    "AlbumMetricsPayload",
    "AlbumProgressPayload",
    "ArtistMetricsPayload",
    "ArtistProgressPayload",
    "MilestoneDocument",
    "MilestonePayload",
    "ProgressDocument",
]
