"""Health check endpoint."""

from fastapi import APIRouter

from talentproof import __version__
from talentproof.api.models.health import HealthResponse
from talentproof.bootstrap.database import is_database_configured

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return liveness status and the selected store backend."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        store="postgres" if is_database_configured() else "memory",
    )
