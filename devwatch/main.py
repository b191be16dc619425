from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from devwatch.api.router import api_router
from devwatch.config import settings
from devwatch.core.database import close_db, init_db
from devwatch.core.exceptions import DevwatchError, devwatch_error_handler
from devwatch.core.logconfig import configure_logging
from devwatch.core.middleware import RequestLoggingMiddleware

configure_logging(settings.devwatch_log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    await init_db()
    logger.info(
        "devwatch_starting",
        availability_policy=settings.devwatch_availability_policy,
        precision=settings.devwatch_availability_precision,
    )
    yield

    await close_db()
    logger.info("devwatch_stopping")


app = FastAPI(
    title="devwatch",
    description="Device availability over trailing time windows",
    version="0.1.0",
    lifespan=lifespan,
)

# Exception handler
app.add_exception_handler(DevwatchError, devwatch_error_handler)

# Middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)


@app.get("/")
async def root():
    return {"service": "devwatch", "version": "0.1.0"}
