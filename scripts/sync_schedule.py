#!/usr/bin/env python3
"""Run one dataset refresh and print what the local cache now holds.

Configuration comes from ``CONFSYNC_*`` environment variables; command
line flags override them.

Examples::

    python scripts/sync_schedule.py --source https://example.org/conferences.json --store-dir ~/.confsync
    python scripts/sync_schedule.py --source data/conferences.json --force --favorite 7:123
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyconfsync import ConferenceDataManager, SyncConfig  # noqa: E402


def _parse_favorite(value: str) -> tuple[int, int]:
    conference, _, event = value.partition(":")
    try:
        return int(conference), int(event)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected CONFERENCE_ID:EVENT_ID, got {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--source", help="dataset URL or path (default: CONFSYNC_SOURCE_URL)")
    parser.add_argument("--store-dir", help="cache directory (default: CONFSYNC_STORE_DIR)")
    parser.add_argument("--force", action="store_true", help="bypass the fetch throttle")
    parser.add_argument("--select", type=int, default=0, help="conference index to summarize")
    parser.add_argument(
        "--favorite",
        type=_parse_favorite,
        action="append",
        default=[],
        metavar="CONF:EVENT",
        help="toggle an event favorite on (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.source:
        overrides["source_url"] = args.source
    if args.store_dir:
        overrides["store_dir"] = str(Path(args.store_dir).expanduser())
    config = SyncConfig.from_env(**overrides)

    async with ConferenceDataManager(config) as manager:
        outcome = await manager.refresh(forced=args.force)
        print(f"refresh: {outcome.status.value}" + (f" ({outcome.reason.value})" if outcome.reason else ""))
        if outcome.changed:
            print("  dataset replaced")
        if outcome.error is not None:
            print(f"  error: {outcome.error}")

        for conference_id, event_id in args.favorite:
            await manager.toggle_favorite(conference_id, event_id, remove=False)

        manager.select_conference(args.select)
        conference = manager.current_conference()
        if conference is None:
            print("no conference selected")
            return 0 if outcome.ok else 1

        print(f"conference: {conference.info.name} (id={conference.id})")
        print(f"  events: {len(conference.schedule)}")
        for event in manager.favorite_events(conference):
            start = conference.local_start(event)
            when = start.strftime("%a %H:%M") if start is not None else event.start_time
            print(f"  * {when} {event.title}")
    return 0 if outcome.ok else 1


def main() -> int:
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
