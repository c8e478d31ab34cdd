"""Health check endpoints."""
from fastapi import APIRouter, Depends, Response, status
from typing import Dict, Any

from app.core.dependencies import get_health_service
from app.services.health_service import HealthCheckService, HealthStatus

router = APIRouter()


@router.get("/health", tags=["health"])
async def simple_health_check() -> Dict[str, str]:
    """
    Simple health check for load balancer - no dependency checks.
    """
    return {"status": "ok"}


@router.get("/health/detailed", tags=["health"])
async def detailed_health_check(
    response: Response,
    service: HealthCheckService = Depends(get_health_service),
) -> Dict[str, Any]:
    """
    Detailed health check with dependency checks.

    Returns HTTP 200 when healthy or degraded, 503 when the database is down.
    Components: database (bookmarks), redis (stats cache), tour_api (key).
    """
    health_data = service.get_overall_health()

    if health_data["status"] == HealthStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        response.status_code = status.HTTP_200_OK

    return health_data
