"""Device and outage storage — the query contract the availability calculation reads from."""

import time

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from devwatch.core.database import Device, DeviceOutage
from devwatch.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from devwatch.services.availability import OutageInterval

logger = structlog.get_logger()


def _now(now: int | None) -> int:
    return int(time.time()) if now is None else now


def to_interval(outage: DeviceOutage) -> OutageInterval:
    return OutageInterval(
        started_at=outage.going_down,
        ended_at=outage.up_again,
        prior_uptime_seconds=outage.uptime,
    )


# ── Devices ──────────────────────────────────────────────────────────────────


async def create_device(
    session_factory: async_sessionmaker,
    hostname: str,
    uptime: int | None = None,
) -> Device:
    if uptime is not None and uptime < 0:
        raise InvalidArgumentError("Uptime must not be negative.", details={"uptime": uptime})

    device = Device(hostname=hostname, uptime=uptime, status="up")
    async with session_factory() as session:
        session.add(device)
        try:
            await session.commit()
        except IntegrityError:
            raise ConflictError(f"Device '{hostname}' already exists.") from None
        await session.refresh(device)

    logger.info("device_created", device_id=device.device_id, hostname=hostname)
    return device


async def get_device(session_factory: async_sessionmaker, device_id: int) -> Device:
    async with session_factory() as session:
        device = await session.get(Device, device_id)
    if device is None:
        raise NotFoundError(f"Device {device_id} not found.")
    return device


async def list_devices(session_factory: async_sessionmaker) -> list[Device]:
    async with session_factory() as session:
        result = await session.execute(select(Device).order_by(Device.device_id))
        return list(result.scalars().all())


async def update_device_uptime(
    session_factory: async_sessionmaker,
    device_id: int,
    uptime: int | None,
) -> Device:
    """Set the continuous uptime reported for a device (None = unknown)."""
    if uptime is not None and uptime < 0:
        raise InvalidArgumentError("Uptime must not be negative.", details={"uptime": uptime})

    async with session_factory() as session:
        device = await session.get(Device, device_id)
        if device is None:
            raise NotFoundError(f"Device {device_id} not found.")
        device.uptime = uptime
        await session.commit()
        await session.refresh(device)
    return device


# ── Outages ──────────────────────────────────────────────────────────────────


async def fetch_outages(
    session_factory: async_sessionmaker,
    device_id: int,
    duration: int,
    now: int,
) -> list[OutageInterval]:
    """Outages that ended at or after now - duration (or are ongoing), oldest first."""
    cutoff = now - duration
    async with session_factory() as session:
        result = await session.execute(
            select(DeviceOutage)
            .where(
                DeviceOutage.device_id == device_id,
                or_(DeviceOutage.up_again >= cutoff, DeviceOutage.up_again.is_(None)),
            )
            .order_by(DeviceOutage.going_down, DeviceOutage.id)
        )
        rows = list(result.scalars().all())
    return [to_interval(row) for row in rows]


async def open_outage(
    session_factory: async_sessionmaker,
    device_id: int,
    now: int | None = None,
) -> DeviceOutage:
    """Record a device going down at now.

    The device's current uptime is stored on the outage, then reset to 0.
    """
    now = _now(now)
    async with session_factory() as session:
        device = await session.get(Device, device_id)
        if device is None:
            raise NotFoundError(f"Device {device_id} not found.")

        open_count = await session.scalar(
            select(func.count())
            .select_from(DeviceOutage)
            .where(DeviceOutage.device_id == device_id, DeviceOutage.up_again.is_(None))
        )
        if open_count:
            raise ConflictError(f"Device {device_id} already has an open outage.")

        outage = DeviceOutage(
            device_id=device_id,
            going_down=now,
            up_again=None,
            uptime=device.uptime,
        )
        session.add(outage)
        device.uptime = 0
        device.status = "down"
        await session.commit()
        await session.refresh(outage)

    logger.warning("outage_opened", device_id=device_id, going_down=now, prior_uptime=outage.uptime)
    return outage


async def close_outage(
    session_factory: async_sessionmaker,
    device_id: int,
    now: int | None = None,
) -> DeviceOutage:
    """Record a device coming back up at now by closing its newest open outage."""
    now = _now(now)
    async with session_factory() as session:
        device = await session.get(Device, device_id)
        if device is None:
            raise NotFoundError(f"Device {device_id} not found.")

        result = await session.execute(
            select(DeviceOutage)
            .where(DeviceOutage.device_id == device_id, DeviceOutage.up_again.is_(None))
            .order_by(DeviceOutage.going_down.desc())
            .limit(1)
        )
        outage = result.scalar_one_or_none()
        if outage is None:
            raise ConflictError(f"Device {device_id} has no open outage.")

        outage.up_again = now
        device.status = "up"
        await session.commit()
        await session.refresh(outage)

    logger.info(
        "outage_closed",
        device_id=device_id,
        up_again=now,
        downtime_seconds=outage.up_again - outage.going_down,
    )
    return outage


async def list_outages(
    session_factory: async_sessionmaker,
    device_id: int,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[DeviceOutage], int]:
    """Return paginated outages for a device, newest first."""
    async with session_factory() as session:
        total = await session.scalar(
            select(func.count()).select_from(DeviceOutage).where(DeviceOutage.device_id == device_id)
        ) or 0

        result = await session.execute(
            select(DeviceOutage)
            .where(DeviceOutage.device_id == device_id)
            .order_by(DeviceOutage.going_down.desc())
            .offset(offset)
            .limit(limit)
        )
        outages = list(result.scalars().all())

    return outages, total
