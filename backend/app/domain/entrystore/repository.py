"""Persistence adapters for growth entries."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    and_,
    insert,
    or_,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ...infra.db import get_engine
from ...infra.logging import get_logger
from .errors import CursorNotFoundError, EntryNotFoundError, StorageFailure
from .models import EntryRow, utcnow
from .tags import EMPTY_TAGS

__all__ = [
    "ENTRIES_TABLE",
    "EntryRepository",
    "InMemoryEntryRepository",
    "SqlEntryRepository",
    "build_entry_repository",
    "define_entries_table",
]

logger = get_logger(__name__)

ENTRIES_TABLE = "growth_entries"

Clock = Callable[[], datetime]


class EntryRepository(Protocol):  # pragma: no cover - interface only
    """Minimal persistence contract consumed by :class:`EntryStoreService`."""

    def find_page(self, after_cursor: Optional[str], limit: int) -> List[EntryRow]:
        """Rows strictly after ``after_cursor``, date then sequence descending."""

    def insert(self, text: str, effort: int, tags_encoded: str) -> EntryRow:
        """Persist a row; id, sequence and date are assigned here."""

    def get(self, entry_id: str) -> EntryRow: ...


def define_entries_table(metadata: MetaData) -> Table:
    """Table layout shared by the migration, tests and ad-hoc schema setup."""

    return Table(
        ENTRIES_TABLE,
        metadata,
        Column("sequence", Integer, primary_key=True, autoincrement=True),
        Column("entry_id", String(36), nullable=False, unique=True),
        Column("date", DateTime(timezone=True), nullable=False),
        Column("text", Text, nullable=False),
        Column("effort", Integer, nullable=False),
        Column("tags", Text, nullable=False, server_default=EMPTY_TAGS),
        Index("ix_growth_entries_date_sequence", "date", "sequence"),
    )


def _order_key(row: EntryRow) -> Tuple[datetime, int]:
    return (row.date, row.sequence)


class InMemoryEntryRepository(EntryRepository):
    """List-backed adapter used for local development and tests."""

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._lock = RLock()
        self._clock = clock or utcnow
        self._rows: List[EntryRow] = []
        self._index: Dict[str, EntryRow] = {}
        self._next_sequence = 1

    def insert(self, text: str, effort: int, tags_encoded: str) -> EntryRow:
        with self._lock:
            row = EntryRow(
                entry_id=str(uuid4()),
                sequence=self._next_sequence,
                date=_as_utc(self._clock()),
                text=text,
                effort=effort,
                tags_encoded=tags_encoded or EMPTY_TAGS,
            )
            self._next_sequence += 1
            self._rows.append(row)
            self._rows.sort(key=_order_key, reverse=True)
            self._index[row.entry_id] = row
            return row

    def find_page(self, after_cursor: Optional[str], limit: int) -> List[EntryRow]:
        with self._lock:
            rows = self._rows
            if after_cursor is not None:
                anchor = self._index.get(after_cursor)
                if anchor is None:
                    raise CursorNotFoundError(after_cursor)
                anchor_key = _order_key(anchor)
                rows = [row for row in rows if _order_key(row) < anchor_key]
            return list(rows[: max(limit, 0)])

    def get(self, entry_id: str) -> EntryRow:
        with self._lock:
            row = self._index.get(entry_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        return row


class SqlEntryRepository(EntryRepository):
    """SQLAlchemy Core adapter (PostgreSQL in deployments, SQLite in tests)."""

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        table: Optional[Table] = None,
        clock: Clock | None = None,
    ) -> None:
        self._engine = engine or get_engine()
        self._clock = clock or utcnow
        if table is not None:
            self._entries = table
        else:
            try:
                self._entries = Table(
                    ENTRIES_TABLE, MetaData(), autoload_with=self._engine
                )
            except SQLAlchemyError as exc:
                raise StorageFailure(
                    f"Unable to load table '{ENTRIES_TABLE}'",
                    details={"table": ENTRIES_TABLE},
                ) from exc

    def insert(self, text: str, effort: int, tags_encoded: str) -> EntryRow:
        stmt = (
            insert(self._entries)
            .values(
                entry_id=str(uuid4()),
                date=_as_utc(self._clock()),
                text=text,
                effort=effort,
                tags=tags_encoded or EMPTY_TAGS,
            )
            .returning(self._entries)
        )
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            raise _storage_failure("insert", exc) from exc
        if row is None:  # pragma: no cover - defensive
            raise StorageFailure("Insert returned no row")
        return _row_from_mapping(row)

    def find_page(self, after_cursor: Optional[str], limit: int) -> List[EntryRow]:
        c = self._entries.c
        stmt = (
            select(self._entries)
            .order_by(c.date.desc(), c.sequence.desc())
            .limit(max(limit, 0))
        )
        try:
            with self._engine.begin() as conn:
                if after_cursor is not None:
                    anchor = (
                        conn.execute(
                            select(c.date, c.sequence).where(
                                c.entry_id == after_cursor
                            )
                        )
                        .mappings()
                        .first()
                    )
                    if anchor is None:
                        raise CursorNotFoundError(after_cursor)
                    stmt = stmt.where(
                        or_(
                            c.date < anchor["date"],
                            and_(
                                c.date == anchor["date"],
                                c.sequence < anchor["sequence"],
                            ),
                        )
                    )
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            raise _storage_failure("find_page", exc) from exc
        return [_row_from_mapping(row) for row in rows]

    def get(self, entry_id: str) -> EntryRow:
        stmt = select(self._entries).where(self._entries.c.entry_id == entry_id)
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            raise _storage_failure("get", exc) from exc
        if row is None:
            raise EntryNotFoundError(entry_id)
        return _row_from_mapping(row)


def build_entry_repository(
    *,
    prefer_sql: bool = True,
    fallback_to_memory: bool = False,
    engine: Optional[Engine] = None,
) -> EntryRepository:
    """Factory that returns the desired repository implementation."""

    if prefer_sql:
        try:
            return SqlEntryRepository(engine)
        except Exception:
            if not fallback_to_memory:
                raise
            logger.warning(
                "sql_entry_repository_unavailable_falling_back",
                exc_info=True,
            )
    return InMemoryEntryRepository()


def _as_utc(value: datetime) -> datetime:
    return _ensure_aware(value).astimezone(timezone.utc)


def _ensure_aware(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_from_mapping(row: Mapping[str, Any]) -> EntryRow:
    return EntryRow(
        entry_id=row["entry_id"],
        sequence=int(row["sequence"]),
        date=_ensure_aware(row["date"]),
        text=row["text"],
        effort=int(row["effort"]),
        tags_encoded=row.get("tags") or EMPTY_TAGS,
    )


def _storage_failure(operation: str, exc: SQLAlchemyError) -> StorageFailure:
    logger.error(
        "entry_repository_failure",
        extra={"operation": operation, "error": exc.__class__.__name__},
    )
    return StorageFailure(
        f"Entry storage {operation} failed",
        details={"operation": operation, "error": exc.__class__.__name__},
    )
