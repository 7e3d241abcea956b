"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from api.models.responses import HealthResponse
from core.config import API_VERSION
from services.calendar import graph_configured

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Computation needs no external services, so missing Graph credentials are
    reported but do not make the API unhealthy.
    """
    configured = graph_configured()
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        graph_configured=configured,
        timestamp=datetime.now(timezone.utc).isoformat(),
        error=None if configured else "MS Graph credentials not configured",
    )
