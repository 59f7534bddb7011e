"""Health Probe: liveness endpoint for container orchestration.

Invariants:
    - GET /health always returns 200 while the process is up
    - Reports the open-session count, nothing about individual sessions
"""

from fastapi import APIRouter, Depends, status

from toolbox_gateway.api.dependencies import get_gateway
from toolbox_gateway.services.gateway import Gateway

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(gateway: Gateway = Depends(get_gateway)):
    """Basic liveness probe."""
    return {
        "status": "healthy",
        "service": gateway.settings.service_name,
        "version": gateway.settings.service_version,
        "sessions": gateway.sessions.size(),
    }
