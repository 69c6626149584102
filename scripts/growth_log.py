"""Record growth entries and print the timeline with the current streak.

Run from the repository root: ``python -m scripts.growth_log timeline``.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import make_url

from backend.app.config import Settings, load_settings
from backend.app.domain.entrystore import (
    EntryStoreError,
    EntryStoreService,
    InMemoryEntryRepository,
    SqlEntryRepository,
    define_entries_table,
    parse_tag_input,
)
from backend.app.domain.timeline import TimelineSession, local_day
from backend.app.infra.logging import configure_logging


def build_store(settings: Settings, *, in_memory: bool = False) -> EntryStoreService:
    repository = InMemoryEntryRepository() if in_memory else SqlEntryRepository(
        create_engine(settings.database_url, future=True)
    )
    return EntryStoreService(
        repository,
        rules=settings.entries,
        default_page_size=settings.timeline.page_size,
        max_page_size=settings.timeline.max_page_size,
    )


def init_db(settings: Settings) -> None:
    """Create the entries table directly, for SQLite setups without Alembic."""

    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(settings.database_url, future=True)
    metadata = MetaData()
    define_entries_table(metadata)
    metadata.create_all(engine)
    print(f"Schema ready at {url.render_as_string(hide_password=True)}")


def print_timeline(session: TimelineSession, settings: Settings) -> None:
    tz = settings.timeline.tzinfo
    print(f"Timeline  (streak: {session.streak} day(s))")
    if not session.entries:
        print("  No entries yet.")
        return
    for entry in session.entries:
        day = local_day(entry.date, tz).isoformat()
        stars = "*" * entry.effort
        tags = f"  [{', '.join(entry.tags)}]" if entry.tags else ""
        print(f"  {day}  {stars:<5}  {entry.text}{tags}")
    if session.has_more:
        print("  ... more entries available (use --pages to load more)")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--profile",
        default=None,
        help="Settings profile to load (defaults to GROWTHLOG_CONFIG_PROFILE or 'dev').",
    )
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Use a throwaway in-memory store instead of the configured database.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Record a new entry.")
    add_parser.add_argument("text", help="What you grew in today.")
    add_parser.add_argument("--effort", type=int, default=3, help="Effort 1-5.")
    add_parser.add_argument(
        "--tags", default="", help="Comma-separated tags, e.g. 'study, family'."
    )

    timeline_parser = subparsers.add_parser("timeline", help="Show recent entries.")
    timeline_parser.add_argument(
        "--pages", type=int, default=1, help="Number of pages to load."
    )
    timeline_parser.add_argument(
        "--page-size", type=int, default=None, help="Entries per page."
    )

    subparsers.add_parser("init-db", help="Create the entries table if missing.")

    args = parser.parse_args()
    settings = load_settings(args.profile)
    configure_logging(settings.logging)

    if args.command == "init-db":
        init_db(settings)
        return

    try:
        store = build_store(settings, in_memory=args.memory)
        if args.command == "add":
            session = TimelineSession(store, tz=settings.timeline.tzinfo)
            entry = session.record(args.text, args.effort, parse_tag_input(args.tags))
            print(f"Recorded entry {entry.entry_id}")
            if session.last_error is not None:
                print(
                    f"warning: timeline not reloaded: {session.last_error.message}",
                    file=sys.stderr,
                )
                return
            print_timeline(session, settings)
            return

        session = TimelineSession(
            store, page_size=args.page_size, tz=settings.timeline.tzinfo
        )
        for _ in range(max(args.pages, 1)):
            if not session.has_more:
                break
            session.load_more()
        print_timeline(session, settings)
    except EntryStoreError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
