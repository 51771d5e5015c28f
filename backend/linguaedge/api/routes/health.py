"""Health check route.

Lives under a reserved prefix so it cannot shadow any origin path.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from linguaedge import __version__
from linguaedge.api.dependencies import AppSettings, Pages

router = APIRouter()

HEALTH_PATH = "/__linguaedge/health"


class HealthResponse(BaseModel):
    """Liveness and page cache occupancy."""
    status: str
    version: str
    configured: bool
    page_cache_entries: int
    page_cache_active_entries: int


@router.get(HEALTH_PATH, include_in_schema=False)
async def health(page_cache: Pages, settings: AppSettings) -> HealthResponse:
    """Health check endpoint."""
    stats = page_cache.store.get_stats()
    return HealthResponse(
        status="healthy",
        version=__version__,
        configured=bool(settings.api_key),
        page_cache_entries=stats["total_entries"],
        page_cache_active_entries=stats["active_entries"],
    )
