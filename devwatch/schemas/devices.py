from pydantic import BaseModel, Field


class DeviceCreateRequest(BaseModel):
    hostname: str = Field(..., min_length=1, max_length=255)
    uptime: int | None = Field(None, ge=0)


class DeviceUptimeRequest(BaseModel):
    uptime: int | None = Field(None, ge=0)  # None = unknown


class DeviceResponse(BaseModel):
    device_id: int
    hostname: str
    uptime: int | None = None
    status: str  # "up" or "down"
    created_at: str


class DeviceListResponse(BaseModel):
    devices: list[DeviceResponse]
    total: int
