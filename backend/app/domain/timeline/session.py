"""Session-scoped timeline state for one view of the entry log."""

from __future__ import annotations

from datetime import date, tzinfo
from threading import Lock
from typing import Callable, List, Optional, Sequence, Tuple

from ...infra.logging import get_logger
from ..entrystore.errors import EntryStoreError
from ..entrystore.models import Entry, EntryPage
from ..entrystore.service import EntryStoreService
from .streak import calculate_streak

logger = get_logger(__name__)

__all__ = ["TimelineSession"]


class TimelineSession:
    """Accumulates pages from the store and derives the current streak.

    One instance backs one timeline view. Pages are fetched one at a time;
    a call made while another fetch is running is skipped rather than
    queued. A failed fetch leaves the already loaded entries untouched.
    """

    def __init__(
        self,
        store: EntryStoreService,
        *,
        page_size: int | None = None,
        tz: tzinfo | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._store = store
        self._page_size = page_size or store.default_page_size
        self._tz = tz
        self._today = today
        self._entries: List[Entry] = []
        self._next_cursor: Optional[str] = None
        self._pages_loaded = 0
        self._exhausted = False
        self._in_flight = Lock()
        self.last_error: Optional[EntryStoreError] = None

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def pages_loaded(self) -> int:
        return self._pages_loaded

    @property
    def has_more(self) -> bool:
        return not self._exhausted

    @property
    def is_loading(self) -> bool:
        return self._in_flight.locked()

    @property
    def streak(self) -> int:
        today = self._today() if self._today else None
        return calculate_streak(self._entries, today=today, tz=self._tz)

    def load_more(self) -> List[Entry]:
        """Fetch the next page; returns the new entries (empty when skipped)."""

        if self._exhausted:
            return []
        if not self._in_flight.acquire(blocking=False):
            logger.debug("timeline_load_skipped_in_flight")
            return []
        try:
            page = self._fetch(self._next_cursor)
            self._entries.extend(page.entries)
            self._next_cursor = page.next_cursor
            self._exhausted = page.next_cursor is None
            self._pages_loaded += 1
            return list(page.entries)
        finally:
            self._in_flight.release()

    def refresh(self) -> None:
        """Reload as many pages as are loaded now, swapping in only on success."""

        if not self._in_flight.acquire(blocking=False):
            logger.debug("timeline_refresh_skipped_in_flight")
            return
        try:
            target_pages = max(self._pages_loaded, 1)
            entries: List[Entry] = []
            cursor: Optional[str] = None
            loaded = 0
            while loaded < target_pages:
                page = self._fetch(cursor)
                entries.extend(page.entries)
                cursor = page.next_cursor
                loaded += 1
                if cursor is None:
                    break
            self._entries = entries
            self._next_cursor = cursor
            self._exhausted = cursor is None
            self._pages_loaded = loaded
        finally:
            self._in_flight.release()

    def record(
        self, text: str, effort: int, tags: Optional[Sequence[str]] = None
    ) -> Entry:
        """Create an entry and refresh the view so it shows up on top.

        A failed refresh does not undo the create: the entry is returned,
        the loaded pages stay as they were and the error is kept on
        ``last_error``.
        """

        try:
            entry = self._store.create(text, effort, tags)
        except EntryStoreError as exc:
            self.last_error = exc
            raise
        self.last_error = None
        try:
            self.refresh()
        except EntryStoreError as exc:
            self.last_error = exc
            logger.warning(
                "timeline_refresh_failed",
                extra={"entry_id": entry.entry_id, "error_code": exc.error_code},
            )
        return entry

    def _fetch(self, cursor: Optional[str]) -> EntryPage:
        try:
            page = self._store.list(cursor=cursor, page_size=self._page_size)
        except EntryStoreError as exc:
            self.last_error = exc
            logger.warning(
                "timeline_page_failed",
                extra={"cursor": cursor, "error_code": exc.error_code},
            )
            raise
        self.last_error = None
        return page
