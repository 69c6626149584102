"""Entry store service: validation, tag encoding and cursor pagination."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ...config import EntryRules
from ...config.loader import DEFAULT_MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE
from ...infra.logging import get_logger
from ...infra.metrics import MetricsClient, get_metrics_client
from .errors import StorageFailure, ValidationError
from .models import Entry, EntryPage, EntryRow
from .repository import EntryRepository, InMemoryEntryRepository
from .tags import decode_tags, encode_tags

logger = get_logger(__name__)

__all__ = ["EntryStoreService"]


class EntryStoreService:
    """Append-only entry store over an :class:`EntryRepository`.

    ``list`` asks the repository for one row more than the page size; the
    surplus row only signals that another page exists and is never returned.
    The cursor handed back is the id of the last entry on the page, and the
    next call resumes strictly after it.
    """

    def __init__(
        self,
        repository: EntryRepository | None = None,
        *,
        rules: EntryRules | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._repository = repository or InMemoryEntryRepository()
        self._rules = rules or EntryRules()
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._metrics = metrics or get_metrics_client()

    @property
    def default_page_size(self) -> int:
        return self._default_page_size

    @property
    def backend(self) -> str:
        """Name of the repository adapter in use, e.g. for health probes."""

        return type(self._repository).__name__

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def create(
        self,
        text: Optional[str],
        effort: Optional[int],
        tags: Optional[Sequence[str]] = None,
    ) -> Entry:
        normalized_text = self._validate_text(text)
        self._validate_effort(effort)
        tag_list = self._validate_tags(tags)

        row = self._call_repository(
            "insert",
            lambda: self._repository.insert(
                normalized_text, int(effort), encode_tags(tag_list)  # type: ignore[arg-type]
            ),
        )
        entry = self._to_entry(row)
        self._metrics.increment("entries_created_total")
        logger.info(
            "entry_created",
            extra={
                "entry_id": entry.entry_id,
                "effort": entry.effort,
                "tag_count": len(entry.tags),
                "text_length": len(entry.text),
            },
        )
        return entry

    def list(
        self,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> EntryPage:
        size = self._validate_page_size(page_size)
        after = cursor or None
        rows = self._call_repository(
            "find_page", lambda: self._repository.find_page(after, size + 1)
        )
        next_cursor: Optional[str] = None
        if len(rows) > size:
            rows = rows[:size]
            next_cursor = rows[-1].entry_id
        entries = [self._to_entry(row) for row in rows]
        self._metrics.increment("entries_pages_served_total")
        logger.debug(
            "entries_page_served",
            extra={
                "cursor": after,
                "page_size": size,
                "returned": len(entries),
                "has_more": next_cursor is not None,
            },
        )
        return EntryPage(entries=entries, next_cursor=next_cursor)

    def get(self, entry_id: str) -> Entry:
        row = self._call_repository("get", lambda: self._repository.get(entry_id))
        return self._to_entry(row)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _validate_text(self, text: Optional[str]) -> str:
        if not isinstance(text, str) or not text.strip():
            raise self._reject("text", "Text must not be empty", reason="empty")
        if len(text) > self._rules.max_text_length:
            raise self._reject(
                "text",
                f"Text must be at most {self._rules.max_text_length} characters",
                reason="too_long",
                length=len(text),
            )
        return text.strip()

    def _validate_effort(self, effort: Optional[int]) -> None:
        if effort is None:
            raise self._reject("effort", "Effort is required", reason="missing")
        # bool is an int subclass; True must not pass as effort 1.
        if isinstance(effort, bool) or not isinstance(effort, int):
            raise self._reject("effort", "Effort must be an integer", reason="type")
        low, high = self._rules.min_effort, self._rules.max_effort
        if not low <= effort <= high:
            raise self._reject(
                "effort",
                f"Effort must be between {low} and {high}",
                reason="out_of_range",
                value=effort,
            )

    def _validate_tags(self, tags: Optional[Sequence[str]]) -> List[str]:
        if tags is None:
            return []
        if isinstance(tags, (str, bytes)):
            raise self._reject("tags", "Tags must be a list of strings", reason="type")
        tag_list = list(tags)
        for position, tag in enumerate(tag_list):
            if not isinstance(tag, str) or not tag.strip():
                raise self._reject(
                    "tags",
                    "Tags must be non-empty strings",
                    reason="empty_tag",
                    position=position,
                )
        return tag_list

    def _validate_page_size(self, page_size: Optional[int]) -> int:
        if page_size is None:
            return self._default_page_size
        if isinstance(page_size, bool) or not isinstance(page_size, int):
            raise self._reject("page_size", "Page size must be an integer", reason="type")
        if not 1 <= page_size <= self._max_page_size:
            raise self._reject(
                "page_size",
                f"Page size must be between 1 and {self._max_page_size}",
                reason="out_of_range",
                value=page_size,
            )
        return page_size

    def _reject(self, field: str, message: str, **details: Any) -> ValidationError:
        self._metrics.increment("entries_rejected_total")
        payload: Dict[str, Any] = {"field": field, **details}
        logger.warning("entry_rejected", extra=payload)
        return ValidationError(message, details=payload)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _call_repository(self, operation: str, call):
        try:
            return call()
        except StorageFailure:
            self._metrics.increment("entries_storage_failures_total")
            logger.error("entry_store_storage_failure", extra={"operation": operation})
            raise

    @staticmethod
    def _to_entry(row: EntryRow) -> Entry:
        try:
            tags = tuple(decode_tags(row.tags_encoded))
        except ValueError as exc:
            raise StorageFailure(
                "Stored tags are not a valid JSON array",
                details={"entry_id": row.entry_id},
            ) from exc
        return Entry(
            entry_id=row.entry_id,
            text=row.text,
            effort=row.effort,
            date=row.date,
            tags=tags,
            sequence=row.sequence,
        )
