"""Entry endpoints: cursor-paginated timeline reads and entry creation."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from pydantic import BaseModel, ConfigDict, Field

from ...api.dependencies import get_entry_store
from ...domain.entrystore import Entry, EntryStoreError, EntryStoreService
from ...infra.logging import get_logger

router = APIRouter(prefix="/api/entries", tags=["entries"])
logger = get_logger(__name__)

MAX_CURSOR_LENGTH = 64
EntryId = Annotated[str, Path(..., min_length=1, max_length=MAX_CURSOR_LENGTH)]


class EntryCreateRequest(BaseModel):
    text: Optional[str] = Field(default=None, description="What you grew in today.")
    effort: Optional[int] = Field(default=None, description="Self-rated effort.")
    tags: Optional[List[str]] = Field(
        default=None, description="Ordered tags; omitted means no tags."
    )


class EntryRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entry_id: str = Field(alias="id")
    text: str
    effort: int
    tags: List[str] = Field(default_factory=list)
    date: datetime


class EntryListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entries: List[EntryRecord] = Field(default_factory=list)
    next_cursor: Optional[str] = Field(default=None, alias="nextCursor")


@router.get(
    "",
    response_model=EntryListResponse,
    summary="List entries newest first",
)
def list_entries(
    cursor: Annotated[
        Optional[str],
        Query(
            max_length=MAX_CURSOR_LENGTH,
            description="Id of the last entry already shown; the page starts after it.",
        ),
    ] = None,
    page_size: Annotated[Optional[int], Query()] = None,
    store: EntryStoreService = Depends(get_entry_store),
) -> EntryListResponse:
    try:
        page = store.list(cursor=cursor, page_size=page_size)
    except EntryStoreError as exc:
        raise _handle_store_error(exc) from exc
    return EntryListResponse(
        entries=[_to_record(entry) for entry in page.entries],
        next_cursor=page.next_cursor,
    )


@router.post(
    "",
    response_model=EntryRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Record a growth entry",
)
def create_entry(
    payload: EntryCreateRequest,
    store: EntryStoreService = Depends(get_entry_store),
) -> EntryRecord:
    try:
        entry = store.create(payload.text, payload.effort, payload.tags)
    except EntryStoreError as exc:
        raise _handle_store_error(exc) from exc
    logger.info("entries_api_entry_created", extra={"entry_id": entry.entry_id})
    return _to_record(entry)


@router.get(
    "/{entry_id}",
    response_model=EntryRecord,
    summary="Retrieve a single entry",
)
def get_entry(
    entry_id: EntryId,
    store: EntryStoreService = Depends(get_entry_store),
) -> EntryRecord:
    try:
        entry = store.get(entry_id)
    except EntryStoreError as exc:
        raise _handle_store_error(exc) from exc
    return _to_record(entry)


def _to_record(entry: Entry) -> EntryRecord:
    return EntryRecord(
        entry_id=entry.entry_id,
        text=entry.text,
        effort=entry.effort,
        tags=list(entry.tags),
        date=entry.date,
    )


def _handle_store_error(exc: EntryStoreError) -> HTTPException:
    return HTTPException(
        status_code=int(exc.status_code),
        detail={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )
