"""Health check endpoints. Used for liveness and readiness probes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from project_cache.api.v1.dependencies import get_cache
from project_cache.infrastructure.cache.redis_cache import CacheService
from project_cache.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Cache enabled but unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(
    cache: CacheService | None = Depends(get_cache),
) -> ReadinessResponse | JSONResponse:
    """Return 200 if the cache is usable or disabled; 503 if enabled but unreachable."""
    if cache is None:
        return ReadinessResponse(cache="disabled")
    if await cache.ping():
        return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(message="Cache unreachable").model_dump(),
    )
