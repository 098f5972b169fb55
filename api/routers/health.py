"""
Health check endpoint.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status

from api import __version__
from api.dependencies import get_cache_repository
from api.schemas.common import HealthResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 OK while the API is running, with or without a cache.",
)
async def health_check(cache_repo=Depends(get_cache_repository)) -> HealthResponse:
    """
    Basic health check endpoint.

    Does not call any source, so it is suitable for load balancer probes.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat() + "Z",
        version=__version__,
        cache="connected" if cache_repo is not None else "disabled",
    )
