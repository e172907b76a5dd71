"""Load the raw listening-history corpus for batch reprocessing."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, cast

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

HISTORY_FILE_GLOB: Final[str] = "listening-history*.json"

log = logging.getLogger(__name__)

type HistoryRecord = object


@dataclass(slots=True)
class HistoryCorpus:
    """Raw play records gathered from one or more history files."""

    records: list[HistoryRecord] = field(default_factory=list[HistoryRecord])
    files_loaded: list[Path] = field(default_factory=list["Path"])
    files_failed: list[Path] = field(default_factory=list["Path"])
    duplicates_removed: int = 0


def discover_history_files(data_dir: Path) -> list[Path]:
    if not data_dir.is_dir():
        return []
    return sorted(data_dir.glob(HISTORY_FILE_GLOB))


def load_history(
    data_dir: Path | None = None,
    *,
    extra_files: Sequence[Path] = (),
    deduplicate: bool = True,
) -> HistoryCorpus:
    """Concatenate the history files and drop records with an already-seen timestamp.

    Unreadable or malformed files are logged and skipped; a record's own validity is left
    to the normalizer so that rejected records are counted in one place.
    """

    paths: list[Path] = discover_history_files(data_dir) if data_dir is not None else []
    paths.extend(path for path in extra_files if path not in paths)

    corpus = HistoryCorpus()
    for path in paths:
        try:
            records = _read_records(path)
        except (OSError, ValueError) as exc:
            log.error("Error loading %s: %s", path, exc)  # noqa: TRY400
            corpus.files_failed.append(path)
            continue
        log.info("Loaded %s tracks from %s", len(records), path.name)
        corpus.records.extend(records)
        corpus.files_loaded.append(path)

    if deduplicate:
        unique = list(_unique_by_timestamp(corpus.records))
        corpus.duplicates_removed = len(corpus.records) - len(unique)
        corpus.records = unique
        log.info(
            "Unique tracks after deduplication: %s (%s removed)",
            len(unique),
            corpus.duplicates_removed,
        )
    return corpus


def _read_records(path: Path) -> list[HistoryRecord]:
    loaded = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(loaded, list):
        raise ValueError("expected a JSON array of play records")  # noqa: TRY004
    return cast(list[HistoryRecord], loaded)


def _unique_by_timestamp(records: Iterable[HistoryRecord]) -> Iterable[HistoryRecord]:
    seen: set[str] = set()
    for record in records:
        timestamp = record.get("timestamp") if isinstance(record, dict) else None
        if timestamp is None:
            # no timestamp to collide on; the normalizer rejects it later
            yield record
            continue
        marker = repr(timestamp)
        if marker in seen:
            continue
        seen.add(marker)
        yield record


__all__ = [
    "HISTORY_FILE_GLOB",
    "HistoryCorpus",
    "HistoryRecord",
    "discover_history_files",
    "load_history",
]
