"""
Health Check Endpoints

Provides system health endpoints for:
- Load balancer health checks
- Kubernetes probes
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from companion import __version__
from companion.api.dependencies import get_companion_service
from companion.config import get_settings
from companion.services.orchestration.companion_service import CompanionService

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness check response with component health."""

    ready: bool
    components: dict


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic health check endpoint for load balancers",
)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns 200 if application is running.
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.env,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Reference data loaded and sessions accepted",
)
async def readiness_check(
    service: CompanionService = Depends(get_companion_service),
) -> ReadinessResponse:
    """
    Readiness check.

    Ready once the intervention catalog is loaded and non-empty.
    """
    components = {
        "catalog": len(service.catalog) > 0,
        "active_sessions": service.session_count,
    }

    return ReadinessResponse(
        ready=components["catalog"],
        components=components,
    )
