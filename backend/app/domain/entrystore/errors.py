"""Entry store exceptions propagated to API handlers and clients."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict

__all__ = [
    "CursorNotFoundError",
    "EntryNotFoundError",
    "EntryStoreError",
    "StorageFailure",
    "ValidationError",
]


class EntryStoreError(Exception):
    """Base error carrying the HTTP mapping used by the routers."""

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    error_code: str = "GROWTH-ERROR"

    def __init__(self, message: str, *, details: Dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(EntryStoreError):
    """Input rejected before any storage mutation."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    error_code = "GROWTH-INVALID-ENTRY"


class EntryNotFoundError(EntryStoreError):
    status_code = HTTPStatus.NOT_FOUND
    error_code = "GROWTH-NOT-FOUND"

    def __init__(self, entry_id: str) -> None:
        super().__init__(
            f"Entry '{entry_id}' not found", details={"entry_id": entry_id}
        )
        self.entry_id = entry_id


class CursorNotFoundError(EntryNotFoundError):
    """Pagination cursor references an id the store does not hold."""

    error_code = "GROWTH-CURSOR-NOT-FOUND"

    def __init__(self, cursor: str) -> None:
        super().__init__(cursor)
        self.message = f"Cursor '{cursor}' does not reference a stored entry"
        self.args = (self.message,)
        self.details = {"cursor": cursor}


class StorageFailure(EntryStoreError):
    """Persistence collaborator failed; the original error is chained."""

    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    error_code = "GROWTH-STORAGE-FAILURE"
