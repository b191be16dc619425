from pydantic import BaseModel


class AvailabilityResponse(BaseModel):
    device_id: int
    period: str
    duration_seconds: int
    policy: str  # "increasing" or "decreasing"
    now: int
    availability: float | None = None  # None = undefined (uptime unknown)


class AvailabilitySummaryResponse(BaseModel):
    device_id: int
    policy: str
    now: int
    windows: dict[str, float | None]  # period → availability %
