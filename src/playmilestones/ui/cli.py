# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from playmilestones.app import build_tracker, process_history_files
from playmilestones.config import configure_logging
from playmilestones.domain.queries import (
    DEFAULT_LEADERBOARD_LIMIT,
    LeaderboardMetric,
    milestone_to_dict,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from playmilestones.domain.tracker import MilestoneTracker

log = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"Must be non-negative: {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Artist milestone and growth tracking")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including rejected play records",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    historical = subparsers.add_parser(
        "process-historical",
        help="Rebuild all progress from listening-history files",
    )
    historical.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding listening-history*.json (defaults to the data directory)",
    )
    historical.add_argument(
        "--file",
        dest="files",
        type=Path,
        action="append",
        default=[],
        help="Additional history file to include; may be repeated",
    )

    leaderboard = subparsers.add_parser("leaderboard", help="Rank artists by a metric")
    leaderboard.add_argument(
        "--metric",
        choices=[metric.value for metric in LeaderboardMetric],
        default=LeaderboardMetric.TOTAL_PLAYS.value,
        help="Ranking metric (default: %(default)s)",
    )
    leaderboard.add_argument(
        "--limit",
        type=_non_negative_int,
        default=DEFAULT_LEADERBOARD_LIMIT,
        help="Page size (default: %(default)s)",
    )
    leaderboard.add_argument(
        "--offset",
        type=_non_negative_int,
        default=0,
        help="Number of ranked artists to skip (default: %(default)s)",
    )

    compare = subparsers.add_parser("compare", help="Compare growth across artists")
    compare.add_argument("artists", nargs="+", help="Artist names as they appear in plays")

    albums = subparsers.add_parser("albums", help="Compare one artist's albums")
    albums.add_argument("artist", help="Artist name")

    trajectory = subparsers.add_parser("trajectory", help="Show an artist's growth trajectory")
    trajectory.add_argument("artist", help="Artist name")

    subparsers.add_parser("awards", help="List the current awards")
    subparsers.add_parser("status", help="Show tracker status")

    milestones = subparsers.add_parser("milestones", help="List reached milestones")
    milestones.add_argument("--artist", help="Only show milestones for this artist key")
    milestones.add_argument(
        "--limit",
        type=_non_negative_int,
        help="Only show the most recent N milestones",
    )

    return parser.parse_args(list(argv))


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _milestones_payload(
    tracker: MilestoneTracker, *, artist: str | None, limit: int | None
) -> list[dict[str, object]]:
    records = list(tracker.all_milestones())
    if artist is not None:
        key = tracker.normalizer.artist_key(artist)
        records = [record for record in records if record.artist == key]
    if limit is not None:
        records = records[-limit:] if limit else []
    return [milestone_to_dict(record) for record in records]


def _run(parsed_args: argparse.Namespace, tracker: MilestoneTracker) -> object:
    command = parsed_args.command
    if command == "process-historical":
        result = process_history_files(
            parsed_args.data_dir,
            extra_files=parsed_args.files,
            tracker=tracker,
        )
        return result.to_dict()

    tracker.initialize()
    if command == "leaderboard":
        return tracker.leaderboard(
            parsed_args.metric, parsed_args.limit, parsed_args.offset
        ).to_dict()
    if command == "compare":
        return tracker.compare(parsed_args.artists).to_dict()
    if command == "albums":
        comparison = tracker.album_comparison(parsed_args.artist)
        if comparison is None:
            log.warning("No progress recorded for %s", parsed_args.artist)
            return None
        return comparison.to_dict()
    if command == "trajectory":
        trajectory = tracker.growth_trajectory(parsed_args.artist)
        if trajectory is None:
            log.warning("No progress recorded for %s", parsed_args.artist)
            return None
        return trajectory.to_dict()
    if command == "awards":
        return [award.to_dict() for award in tracker.awards()]
    if command == "status":
        return tracker.status().to_dict()
    if command == "milestones":
        return _milestones_payload(
            tracker, artist=parsed_args.artist, limit=parsed_args.limit
        )
    raise ValueError(f"Unsupported command: {command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    # invalid arguments exit with status 2 from argparse itself
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        tracker = build_tracker()
        try:
            payload = _run(parsed_args, tracker)
        finally:
            tracker.close()
    except Exception:
        log.exception("Fatal error running %s", parsed_args.command)
        sys.exit(1)

    _print_json(payload)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
