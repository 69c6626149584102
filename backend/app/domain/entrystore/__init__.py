"""Growth entry store package."""

from .errors import (
    CursorNotFoundError,
    EntryNotFoundError,
    EntryStoreError,
    StorageFailure,
    ValidationError,
)
from .models import Entry, EntryPage, EntryRow
from .repository import (
    EntryRepository,
    InMemoryEntryRepository,
    SqlEntryRepository,
    build_entry_repository,
    define_entries_table,
)
from .service import EntryStoreService
from .tags import decode_tags, encode_tags, parse_tag_input

__all__ = [
    "CursorNotFoundError",
    "Entry",
    "EntryNotFoundError",
    "EntryPage",
    "EntryRepository",
    "EntryRow",
    "EntryStoreError",
    "EntryStoreService",
    "InMemoryEntryRepository",
    "SqlEntryRepository",
    "StorageFailure",
    "ValidationError",
    "build_entry_repository",
    "decode_tags",
    "define_entries_table",
    "encode_tags",
    "parse_tag_input",
]
