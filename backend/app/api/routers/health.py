"""System health endpoint for frontend polling."""

from typing import Any

from fastapi import APIRouter, Depends

from ...api.dependencies import get_entry_store, get_settings
from ...config import Settings
from ...domain.entrystore import EntryStoreService

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/healthz")
def healthcheck(
    settings: Settings = Depends(get_settings),
    store: EntryStoreService = Depends(get_entry_store),
) -> dict[str, Any]:
    """Return coarse-grained backend readiness information."""

    return {
        "status": "ok",
        "environment": settings.environment,
        "entryStore": store.backend,
        "timezone": settings.timeline.timezone,
        "pageSize": store.default_page_size,
    }
