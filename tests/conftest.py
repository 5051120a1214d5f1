"""Pytest configuration and fixtures for catalog-search.

The authoritative store is an in-memory SQLite database (aiosqlite) created
per test; the search index is tests.fakes.FakeIndexStore. HTTP tests use
app.main:app with the service container placed on app.state directly
(ASGITransport does not run the lifespan).
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("OUTBOX_RELAY_INTERVAL_SECONDS", "0")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.config import Settings, get_settings
from app.infrastructure.container import CatalogContainer, build_container
from app.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from app.main import app
from tests.fakes import FakeIndexStore

_MEMORY_DB = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
async def engine() -> AsyncEngine:
    """Fresh in-memory database with all tables."""
    db_engine = build_engine(_MEMORY_DB)
    await create_schema(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest.fixture
def index_store() -> FakeIndexStore:
    return FakeIndexStore()


@pytest.fixture
def container(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    index_store: FakeIndexStore,
) -> CatalogContainer:
    """Services wired exactly as in the lifespan, over SQLite and the fake index."""
    return build_container(settings, session_factory, index_store)


@pytest.fixture
async def client(container: CatalogContainer) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app.state.container = container
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.container = None
