from fastapi import APIRouter, Query

import devwatch.core.database as db_module
from devwatch.core.database import Device, DeviceOutage
from devwatch.schemas.devices import (
    DeviceCreateRequest,
    DeviceListResponse,
    DeviceResponse,
    DeviceUptimeRequest,
)
from devwatch.schemas.outages import OutageEventRequest, OutageListResponse, OutageResponse
from devwatch.services.outages import (
    close_outage,
    create_device,
    get_device,
    list_devices,
    list_outages,
    open_outage,
    update_device_uptime,
)

router = APIRouter()


def _device_response(device: Device) -> DeviceResponse:
    return DeviceResponse(
        device_id=device.device_id,
        hostname=device.hostname,
        uptime=device.uptime,
        status=device.status,
        created_at=device.created_at.isoformat() if device.created_at else "",
    )


def _outage_response(outage: DeviceOutage) -> OutageResponse:
    return OutageResponse(
        id=outage.id,
        device_id=outage.device_id,
        going_down=outage.going_down,
        up_again=outage.up_again,
        uptime=outage.uptime,
    )


@router.post("/devices", status_code=201)
async def add_device(body: DeviceCreateRequest) -> DeviceResponse:
    device = await create_device(db_module.async_session, body.hostname, uptime=body.uptime)
    return _device_response(device)


@router.get("/devices")
async def devices() -> DeviceListResponse:
    rows = await list_devices(db_module.async_session)
    return DeviceListResponse(devices=[_device_response(d) for d in rows], total=len(rows))


@router.get("/devices/{device_id}")
async def device_detail(device_id: int) -> DeviceResponse:
    device = await get_device(db_module.async_session, device_id)
    return _device_response(device)


@router.put("/devices/{device_id}/uptime")
async def set_device_uptime(device_id: int, body: DeviceUptimeRequest) -> DeviceResponse:
    device = await update_device_uptime(db_module.async_session, device_id, body.uptime)
    return _device_response(device)


@router.post("/devices/{device_id}/outages/open", status_code=201)
async def outage_open(device_id: int, body: OutageEventRequest | None = None) -> OutageResponse:
    """Record the device going down."""
    now = body.now if body else None
    outage = await open_outage(db_module.async_session, device_id, now=now)
    return _outage_response(outage)


@router.post("/devices/{device_id}/outages/close")
async def outage_close(device_id: int, body: OutageEventRequest | None = None) -> OutageResponse:
    """Record the device coming back up."""
    now = body.now if body else None
    outage = await close_outage(db_module.async_session, device_id, now=now)
    return _outage_response(outage)


@router.get("/devices/{device_id}/outages")
async def outages(
    device_id: int,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> OutageListResponse:
    """Paginated outages for a device, newest first."""
    await get_device(db_module.async_session, device_id)
    rows, total = await list_outages(db_module.async_session, device_id, limit=limit, offset=offset)
    return OutageListResponse(
        outages=[_outage_response(o) for o in rows],
        total=total,
        limit=limit,
        offset=offset,
    )
