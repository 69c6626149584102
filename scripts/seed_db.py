"""Seed script for the growth_entries table.

Writes a short run of daily entries ending today so local UIs and API calls
have a timeline and a non-zero streak to show. Run with
``python -m scripts.seed_db --days 7`` from the repository root.
"""

from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
from typing import Iterator, List

from sqlalchemy import create_engine

from backend.app.config import load_settings
from backend.app.domain.entrystore import EntryStoreService, SqlEntryRepository

SEED_ENTRIES: List[dict[str, object]] = [
    {"text": "Read the SQLAlchemy 2.0 migration guide", "effort": 3, "tags": ["study"]},
    {"text": "Cooked dinner for the family without a recipe", "effort": 2, "tags": ["family", "cooking"]},
    {"text": "Finished the cursor pagination spike", "effort": 5, "tags": ["work"]},
    {"text": "Ran 5k before breakfast", "effort": 4, "tags": []},
    {"text": "Understood how keyset pagination handles ties", "effort": 4, "tags": ["study", "db"]},
]


def _daily_clock(days: int) -> Iterator[datetime]:
    now = datetime.now(timezone.utc)
    # Oldest first so insertion order matches chronology.
    for offset in range(days - 1, -1, -1):
        yield now - timedelta(days=offset)


def seed_entries(days: int) -> int:
    settings = load_settings()
    engine = create_engine(settings.database_url, future=True)
    timestamps = _daily_clock(days)
    repository = SqlEntryRepository(engine, clock=lambda: next(timestamps))
    store = EntryStoreService(repository, rules=settings.entries)

    for index in range(days):
        sample = SEED_ENTRIES[index % len(SEED_ENTRIES)]
        store.create(sample["text"], sample["effort"], sample["tags"])  # type: ignore[arg-type]
    return days


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--days",
        type=int,
        default=len(SEED_ENTRIES),
        help="Number of consecutive days to seed, ending today.",
    )
    args = parser.parse_args()
    inserted = seed_entries(max(args.days, 1))
    print(f"Seeded {inserted} growth entries.")


if __name__ == "__main__":
    main()
