"""Progress gateway backed by two JSON documents on disk."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from pydantic import ValidationError

from playmilestones.adapters.documents import (
    MilestoneDocument,
    ProgressDocument,
    snapshot_from_documents,
    snapshot_to_documents,
)
from playmilestones.domain.errors import PersistenceError

if TYPE_CHECKING:
    from pathlib import Path

    from playmilestones.domain.types import ProgressSnapshot

log = logging.getLogger(__name__)


class JsonFileProgressGateway:
    """Reads and writes ``artist-progress.json`` and ``artist-milestones.json``.

    Missing files load as empty state. Each document is written to a temporary sibling
    first and then moved into place, so a crash never leaves a truncated file behind.
    """

    def __init__(self, progress_path: Path, milestones_path: Path) -> None:
        self.progress_path = progress_path
        self.milestones_path = milestones_path

    def load(self) -> ProgressSnapshot:
        try:
            progress = self._read(self.progress_path, ProgressDocument)
            milestones = self._read(self.milestones_path, MilestoneDocument)
        except (OSError, ValidationError) as exc:
            raise PersistenceError(f"Failed to load progress documents: {exc}") from exc
        snapshot = snapshot_from_documents(progress, milestones)
        log.debug(
            "Loaded %s artists and %s milestones from %s",
            len(snapshot.artists),
            len(snapshot.milestones),
            self.progress_path.parent,
        )
        return snapshot

    def save(self, snapshot: ProgressSnapshot) -> None:
        progress, milestones = snapshot_to_documents(snapshot)
        try:
            self._write(self.progress_path, progress.model_dump_json(by_alias=True, indent=2))
            self._write(self.milestones_path, milestones.model_dump_json(by_alias=True, indent=2))
        except OSError as exc:
            raise PersistenceError(f"Failed to save progress documents: {exc}") from exc

    @staticmethod
    def _read[TDocument: (ProgressDocument, MilestoneDocument)](
        path: Path, document_cls: type[TDocument]
    ) -> TDocument | None:
        if not path.exists():
            return None
        return document_cls.model_validate_json(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)


if TYPE_CHECKING:
    from playmilestones.domain.ports.persistence import ProgressGateway

    _gateway_check: ProgressGateway = JsonFileProgressGateway(Path(), Path())


__all__ = ["JsonFileProgressGateway"]
