import datetime
from pathlib import Path

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from devwatch.config import settings


class Base(DeclarativeBase):
    pass


# ── Devices ──────────────────────────────────────────────────────────────────


class Device(Base):
    __tablename__ = "devices"

    device_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    hostname: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    # Continuous uptime in seconds as last reported; NULL = unknown
    uptime: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="up")  # up/down
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, server_default=func.now()
    )


# ── Outages ──────────────────────────────────────────────────────────────────


class DeviceOutage(Base):
    __tablename__ = "device_outages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("devices.device_id", ondelete="CASCADE"), index=True
    )
    # Epoch seconds
    going_down: Mapped[int] = mapped_column(BigInteger, index=True)
    up_again: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    # Device uptime accumulated right before going down
    uptime: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


# ── Engine & Session ──────────────────────────────────────────────────────────

engine = create_async_engine(settings.devwatch_db_url, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    """Create any missing tables."""
    if engine.url.get_backend_name() == "sqlite" and engine.url.database:
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine."""
    await engine.dispose()

