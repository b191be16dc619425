from pydantic import BaseModel, Field


class OutageEventRequest(BaseModel):
    now: int | None = Field(None, ge=0, description="Epoch seconds; defaults to current time")


class OutageResponse(BaseModel):
    id: int
    device_id: int
    going_down: int
    up_again: int | None = None
    uptime: int | None = None  # device uptime right before going down


class OutageListResponse(BaseModel):
    outages: list[OutageResponse]
    total: int
    limit: int
    offset: int
