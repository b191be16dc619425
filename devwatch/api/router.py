from fastapi import APIRouter

from devwatch.api.availability import router as availability_router
from devwatch.api.devices import router as devices_router
from devwatch.api.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(devices_router, tags=["Devices"])
api_router.include_router(availability_router, tags=["Availability"])
