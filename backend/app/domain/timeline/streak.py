"""Current-streak calculation over a date-descending entry sequence."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Sequence

from ..entrystore.models import Entry

__all__ = ["calculate_streak", "local_day"]


def local_day(moment: datetime, tz: tzinfo) -> date:
    """Calendar day of ``moment`` in ``tz``; naive values are taken as UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def calculate_streak(
    entries: Sequence[Entry],
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> int:
    """Count consecutive days ending today, walking ``entries`` in order.

    The i-th entry must fall on ``today - i`` days. The sequence is trusted
    to be date-descending and is not re-sorted, so a second entry on the same
    day ends the streak there. Only the entries passed in are considered.
    """

    if not entries:
        return 0

    zone = tz or timezone.utc
    reference = today or datetime.now(zone).date()

    streak = 0
    for index, entry in enumerate(entries):
        expected = reference - timedelta(days=index)
        if local_day(entry.date, zone) != expected:
            break
        streak += 1
    return streak
