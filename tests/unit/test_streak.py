"""Tests for the current-streak calculation."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from backend.app.domain.entrystore import Entry
from backend.app.domain.timeline import calculate_streak, local_day

pytestmark = [pytest.mark.timeline]

TODAY = date(2025, 11, 2)


def _entry(moment: datetime, sequence: int = 0) -> Entry:
    return Entry(
        entry_id=f"entry-{sequence}",
        text="grew a little",
        effort=3,
        date=moment,
        sequence=sequence,
    )


def _days_ago(*offsets: int, hour: int = 12) -> list[Entry]:
    return [
        _entry(
            datetime.combine(TODAY - timedelta(days=offset), datetime.min.time(), timezone.utc)
            + timedelta(hours=hour),
            sequence=index,
        )
        for index, offset in enumerate(offsets)
    ]


def test_three_consecutive_days():
    assert calculate_streak(_days_ago(0, 1, 2), today=TODAY) == 3


def test_gap_stops_the_streak():
    assert calculate_streak(_days_ago(0, 3), today=TODAY) == 1


def test_no_entry_today_means_no_streak():
    assert calculate_streak(_days_ago(2), today=TODAY) == 0


def test_empty_sequence():
    assert calculate_streak([], today=TODAY) == 0


def test_streak_only_counts_the_entries_given():
    entries = _days_ago(0, 1, 2, 5)

    assert calculate_streak(entries, today=TODAY) == 3
    assert calculate_streak(entries[:2], today=TODAY) == 2


def test_second_entry_on_the_same_day_ends_the_streak():
    # Position i must land on today - i, so a duplicate day breaks the walk.
    assert calculate_streak(_days_ago(0, 0, 1), today=TODAY) == 1


def test_days_are_cut_in_the_reference_timezone():
    tokyo = ZoneInfo("Asia/Tokyo")
    # 16:00 UTC is already the next calendar day in Tokyo.
    entries = _days_ago(1, 2, hour=16)

    assert calculate_streak(entries, today=TODAY, tz=tokyo) == 2
    assert calculate_streak(entries, today=TODAY, tz=timezone.utc) == 0


def test_today_defaults_to_the_current_day():
    now = datetime.now(timezone.utc)

    assert calculate_streak([_entry(now)]) == 1


def test_local_day_treats_naive_values_as_utc():
    naive = datetime(2025, 11, 1, 20, 0)

    assert local_day(naive, timezone.utc) == date(2025, 11, 1)
    assert local_day(naive, ZoneInfo("Asia/Tokyo")) == date(2025, 11, 2)
