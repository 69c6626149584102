"""Entry store data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple

__all__ = [
    "Entry",
    "EntryPage",
    "EntryRow",
    "utcnow",
]


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EntryRow:
    """Raw persistence row; ``tags_encoded`` is the serialized tag column."""

    entry_id: str
    sequence: int
    date: datetime
    text: str
    effort: int
    tags_encoded: str


@dataclass(frozen=True)
class Entry:
    """A journaled growth record. Never mutated once stored."""

    entry_id: str
    text: str
    effort: int
    date: datetime
    tags: Tuple[str, ...] = ()
    sequence: int = 0


@dataclass(frozen=True)
class EntryPage:
    """One page of entries plus the cursor for the page after it."""

    entries: List[Entry] = field(default_factory=list)
    next_cursor: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None
