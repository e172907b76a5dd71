"""Public interface for the persisted-document adapter."""

from __future__ import annotations

from .schema import (
    ArtistProgressPayload,
    MilestoneDocument,
    MilestonePayload,
    ProgressDocument,
)
from .translator import (
    artist_from_payload,
    artist_to_payload,
    milestone_from_payload,
    milestone_to_payload,
    snapshot_from_documents,
    snapshot_to_documents,
)

__all__ = [
    "ArtistProgressPayload",
    "MilestoneDocument",
    "MilestonePayload",
    "ProgressDocument",
    "artist_from_payload",
    "artist_to_payload",
    "milestone_from_payload",
    "milestone_to_payload",
    "snapshot_from_documents",
    "snapshot_to_documents",
]
