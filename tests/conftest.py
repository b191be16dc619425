import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from devwatch.core.database import Base


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine for tests."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def app_with_db(db_engine, session_factory):
    """FastAPI app wired to the in-memory test database."""
    import devwatch.core.database as db_module

    # Patch the module-level engine and session factory
    original_engine = db_module.engine
    original_session = db_module.async_session
    db_module.engine = db_engine
    db_module.async_session = session_factory

    from devwatch.main import app

    yield app

    db_module.engine = original_engine
    db_module.async_session = original_session


@pytest_asyncio.fixture
async def client(app_with_db):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app_with_db)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
