"""
Shared pytest fixtures for site registry tests.

Provides fixtures for:
- Database engine and sessions (in-memory SQLite via aiosqlite)
- Unit of work factory
- API client (httpx) with the unit of work pointed at the test database
- Auth headers for the break-glass admin and a registered user
- A controllable clock for the site service
"""
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

# Test environment configuration
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DB_DSN", "sqlite+aiosqlite://")
os.environ.setdefault("SECURITY_BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("ADMIN_USERNAME", "root")
os.environ.setdefault("ADMIN_PASSWORD", "Br3akGlass!")

from fastapi import Depends  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from site_registry.api.dependencies import get_site_service, get_unit_of_work  # noqa: E402
from site_registry.application.services.site_service import SiteService  # noqa: E402
from site_registry.infrastructure.database.models import Base  # noqa: E402
from site_registry.infrastructure.database.unit_of_work import SQLAlchemyUnitOfWork  # noqa: E402

ADMIN_USERNAME = os.environ["ADMIN_USERNAME"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


# ============================================================================
# Time Fixtures
# ============================================================================

class ManualClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock starting at 2026-03-01 09:00 UTC."""
    return ManualClock(datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def freeze_time():
    """
    Freeze time for tests.

    Usage:
        def test_something(freeze_time):
            with freeze_time("2026-03-01 09:00:00"):
                ...
    """
    from freezegun import freeze_time
    return freeze_time


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(session_factory):
    """Build fresh units of work against the test database."""
    def _factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)
    return _factory


@pytest.fixture
def mock_uow():
    """
    Mock unit of work for service tests.

    Repositories are AsyncMocks configured per test.
    """
    uow = MagicMock()
    uow.sites = AsyncMock()
    uow.users = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


# ============================================================================
# API Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def api_client(uow_factory, clock) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, backed by the in-memory database."""
    from site_registry.main import app

    async def _override_uow():
        async with uow_factory() as uow:
            yield uow

    def _site_service(uow=Depends(get_unit_of_work)):
        return SiteService(uow, clock=clock)

    app.dependency_overrides[get_unit_of_work] = _override_uow
    app.dependency_overrides[get_site_service] = _site_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_headers(api_client):
    """Bearer header for the break-glass administrator."""
    response = await api_client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def user_headers(api_client):
    """Bearer header for a freshly registered regular user."""
    response = await api_client.post(
        "/api/auth/register",
        json={"username": "fieldtech", "password": "Secret123"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
