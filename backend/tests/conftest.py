"""
Pytest configuration and shared fixtures.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  registers tables on Base.metadata
from app.config import settings
from app.database import Base, get_db
from app.main import app as fastapi_app


@pytest.fixture(autouse=True)
def no_email_key(monkeypatch):
    """Keep every test in log-only email mode unless it opts in."""
    monkeypatch.setattr(settings, "resend_api_key", "")


@pytest_asyncio.fixture
async def engine():
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
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def booking_payload():
    # 2025-06-14 is a Saturday
    return {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "5095550100",
        "tour_date": "2025-06-14",
        "start_time": "10:00 AM",
        "end_time": "4:00 PM",
        "duration_hours": 6,
        "party_size": 4,
        "pickup_location": "Marcus Whitman Hotel",
        "wineries": [
            {"name": "L'Ecole No 41", "city": "Lowden"},
            {"name": "Pepper Bridge", "city": "Walla Walla"},
        ],
    }
