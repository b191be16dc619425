import time

from fastapi import APIRouter

from devwatch.schemas.health import HealthResponse

router = APIRouter()

_start_time = time.monotonic()


@router.get("/health")
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(
        status="ok",
        uptime_seconds=round(time.monotonic() - _start_time, 1),
    )
