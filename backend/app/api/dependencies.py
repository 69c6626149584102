"""Shared API dependencies."""

from __future__ import annotations

from functools import lru_cache

from ..config import Settings, load_settings
from ..domain.entrystore import EntryStoreService, build_entry_repository

__all__ = [
    "get_entry_store",
    "get_settings",
]


@lru_cache()
def _settings_singleton() -> Settings:
    return load_settings()


def get_settings() -> Settings:
    """Return the settings loaded for this process."""

    return _settings_singleton()


@lru_cache()
def _entry_store_singleton() -> EntryStoreService:
    settings = get_settings()
    repository = build_entry_repository(
        fallback_to_memory=settings.environment == "dev",
    )
    return EntryStoreService(
        repository,
        rules=settings.entries,
        default_page_size=settings.timeline.page_size,
        max_page_size=settings.timeline.max_page_size,
    )


def get_entry_store() -> EntryStoreService:
    """Return the process-wide entry store."""

    return _entry_store_singleton()
