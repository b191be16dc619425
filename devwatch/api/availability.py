import time

from fastapi import APIRouter, Query

import devwatch.core.database as db_module
from devwatch.schemas.availability import AvailabilityResponse, AvailabilitySummaryResponse
from devwatch.services.availability import resolve_policy, window_seconds
from devwatch.services.device_availability import (
    get_availability_summary,
    get_device_availability,
)

router = APIRouter()


@router.get("/devices/{device_id}/availability")
async def device_availability(
    device_id: int,
    period: str = Query("day", description="Window: day, week, month or year"),
    precision: int | None = Query(None, ge=0, le=10),
    policy: str | None = Query(None, description="increasing or decreasing; defaults to configured policy"),
    now: int | None = Query(None, ge=0, description="Epoch seconds for the window end"),
) -> AvailabilityResponse:
    """Availability % for one device over a trailing window."""
    duration = window_seconds(period)
    resolved = resolve_policy(policy)
    if now is None:
        now = int(time.time())

    pct = await get_device_availability(
        db_module.async_session,
        device_id,
        duration,
        precision=precision,
        policy=resolved,
        now=now,
    )

    return AvailabilityResponse(
        device_id=device_id,
        period=period.lower(),
        duration_seconds=duration,
        policy=resolved.value,
        now=now,
        availability=pct,
    )


@router.get("/devices/{device_id}/availability/summary")
async def device_availability_summary(
    device_id: int,
    precision: int | None = Query(None, ge=0, le=10),
    policy: str | None = Query(None),
    now: int | None = Query(None, ge=0),
) -> AvailabilitySummaryResponse:
    """Availability % for one device over day, week, month and year."""
    data = await get_availability_summary(
        db_module.async_session,
        device_id,
        precision=precision,
        policy=policy,
        now=now,
    )
    return AvailabilitySummaryResponse(**data)
