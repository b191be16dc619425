"""Device availability service — loads a device and its outages and runs the calculation."""

import time

import structlog
from sqlalchemy.ext.asyncio import async_sessionmaker

from devwatch.config import settings
from devwatch.services import availability as calc
from devwatch.services.availability import AvailabilityPolicy, DeviceSnapshot, OutageInterval
from devwatch.services.outages import fetch_outages, get_device

logger = structlog.get_logger()


def _warn_malformed(device_id: int, outages: list[OutageInterval], now: int) -> None:
    """Log outage records that will skew the result. They are used as-is."""
    previous_end = None
    for outage in outages:
        if not outage.ongoing and outage.ended_at < outage.started_at:
            logger.warning(
                "outage_data_malformed",
                device_id=device_id,
                reason="ends_before_start",
                started_at=outage.started_at,
                ended_at=outage.ended_at,
            )
        elif outage.started_at > now:
            logger.warning(
                "outage_data_malformed",
                device_id=device_id,
                reason="starts_in_future",
                started_at=outage.started_at,
                now=now,
            )
        if previous_end is not None and outage.started_at < previous_end:
            logger.warning(
                "outage_data_malformed",
                device_id=device_id,
                reason="overlapping",
                started_at=outage.started_at,
                previous_end=previous_end,
            )
        end = now if outage.ongoing else outage.ended_at
        previous_end = end if previous_end is None else max(previous_end, end)


async def get_device_availability(
    session_factory: async_sessionmaker,
    device_id: int,
    duration: int,
    precision: int | None = None,
    policy: AvailabilityPolicy | str | None = None,
    now: int | None = None,
) -> float | None:
    """Availability % for a device over the trailing duration, or None if undefined."""
    policy = calc.resolve_policy(policy)
    if precision is None:
        precision = settings.devwatch_availability_precision
    if now is None:
        now = int(time.time())

    device = await get_device(session_factory, device_id)
    outages = await fetch_outages(session_factory, device_id, duration, now)
    _warn_malformed(device_id, outages, now)

    snapshot = DeviceSnapshot(device_id=device.device_id, uptime_seconds=device.uptime)
    result = calc.availability(snapshot, outages, duration, precision, policy=policy, now=now)

    logger.debug(
        "availability_calculated",
        device_id=device_id,
        duration=duration,
        policy=policy.value,
        outages=len(outages),
        availability=result,
    )
    return result


async def get_availability_summary(
    session_factory: async_sessionmaker,
    device_id: int,
    precision: int | None = None,
    policy: AvailabilityPolicy | str | None = None,
    now: int | None = None,
) -> dict:
    """Availability for every named window, evaluated at one shared now."""
    policy = calc.resolve_policy(policy)
    if now is None:
        now = int(time.time())

    windows = {}
    for period, duration in calc.WINDOWS.items():
        windows[period] = await get_device_availability(
            session_factory, device_id, duration, precision=precision, policy=policy, now=now
        )

    return {
        "device_id": device_id,
        "policy": policy.value,
        "now": now,
        "windows": windows,
    }
