from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str  # "ok"
    uptime_seconds: float = 0.0
    version: str = "0.1.0"
