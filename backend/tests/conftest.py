"""Pytest configuration and fixtures for AgriRent tests.

Provides reusable test fixtures for database, authentication, Redis, etc.
The app is imported after the environment points it at a throwaway SQLite
file, so the module-level engine in app.database is the test engine.
"""

import os
import tempfile
from typing import AsyncGenerator

TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"agrirent_test_{os.getpid()}.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["DATABASE_URL_SYNC"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

import fakeredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import create_access_token
from app.auth.password import hash_password
from app.database import Base, async_session, engine
from app.main import app
from app.models import BusinessType, FarmerProfile, FarmType, OwnerProfile, User, UserRole

TEST_PASSWORD = "secret123"


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture(autouse=True)
async def test_schema() -> AsyncGenerator[None, None]:
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and inspecting results outside requests."""
    async with async_session() as session:
        yield session


# ── Redis Fixtures ───────────────────────────────────────────────

@pytest_asyncio.fixture(autouse=True)
async def redis_client(monkeypatch):
    """In-memory Redis shared by token revocation, rate limiting and health."""
    client = fakeredis.FakeAsyncRedis(decode_responses=True)

    async def _get_redis():
        return client

    monkeypatch.setattr("app.auth.revocation.get_redis", _get_redis)
    monkeypatch.setattr("app.middleware.rate_limit.get_redis", _get_redis)
    monkeypatch.setattr("app.routers.health.get_redis", _get_redis)

    yield client

    await client.flushall()
    await client.aclose()


# ── HTTP Client ──────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ── Payload Factories ────────────────────────────────────────────

def farmer_payload(**overrides) -> dict:
    payload = {
        "phone": "9876543210",
        "name": "Murugan K",
        "password": TEST_PASSWORD,
        "password_confirmation": TEST_PASSWORD,
        "primary_role": "farmer",
        "farm_location": "Near the canal, east field",
        "farm_size": 2.5,
        "farm_type": "crop",
        "years_of_experience": 5,
        "village": "Kattur",
        "taluk": "Thiruverumbur",
        "district": "Tiruchirappalli",
        "pincode": "600001",
        "crop_types": ["rice", "banana"],
    }
    payload.update(overrides)
    return payload


def owner_payload(**overrides) -> dict:
    payload = {
        "phone": "9123456780",
        "name": "Selvi Traders",
        "password": TEST_PASSWORD,
        "password_confirmation": TEST_PASSWORD,
        "primary_role": "owner",
        "business_name": "Selvi Agro Rentals",
        "business_type": "company",
        "years_in_business": 8,
        "service_districts": ["Madurai", "Theni"],
        "max_delivery_distance": 40,
        "address_line_1": "12 Market Road",
        "city": "Madurai",
        "district": "Madurai",
        "pincode": "625001",
        "equipment_types": ["tractor", "harvester"],
    }
    payload.update(overrides)
    return payload


def owner_profile_body(**overrides) -> dict:
    """Owner profile create body (no account fields)."""
    body = {
        key: value
        for key, value in owner_payload().items()
        if key not in ("phone", "name", "password", "password_confirmation", "primary_role")
    }
    body.update(overrides)
    return body


def farmer_profile_body(**overrides) -> dict:
    body = {
        key: value
        for key, value in farmer_payload().items()
        if key not in ("phone", "name", "password", "password_confirmation", "primary_role")
    }
    body.update(overrides)
    return body


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ── Test Data Fixtures ───────────────────────────────────────────

def _farmer_profile(**overrides) -> FarmerProfile:
    values = dict(
        farm_location="North plot",
        farm_size=3,
        farm_type=FarmType.MIXED,
        years_of_experience=10,
        village="Vadipatti",
        taluk="Vadipatti",
        district="Madurai",
        pincode="625218",
    )
    values.update(overrides)
    return FarmerProfile(**values)


def _owner_profile(**overrides) -> OwnerProfile:
    values = dict(
        business_type=BusinessType.INDIVIDUAL,
        years_in_business=4,
        service_districts=["Salem"],
        max_delivery_distance=25,
        address_line_1="3 Temple Street",
        city="Salem",
        district="Salem",
        pincode="636001",
    )
    values.update(overrides)
    return OwnerProfile(**values)


async def create_user(
    db: AsyncSession,
    phone: str = "9000000001",
    role: UserRole = UserRole.FARMER,
    farmer: FarmerProfile | None = None,
    owner: OwnerProfile | None = None,
    is_active: bool = True,
) -> User:
    """Insert a user directly, bypassing the registration endpoint."""
    user = User(
        phone=phone,
        name="Test User",
        hashed_password=hash_password(TEST_PASSWORD),
        primary_role=role,
        active_role=role,
        is_active=is_active,
        farmer_profile=farmer,
        owner_profile=owner,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def farmer_user(db_session: AsyncSession) -> User:
    """Farmer with a complete farmer profile and no owner profile."""
    return await create_user(db_session, phone="9000000001", farmer=_farmer_profile())


@pytest_asyncio.fixture
async def dual_user(db_session: AsyncSession) -> User:
    """Farmer-primary user that also holds an owner profile."""
    return await create_user(
        db_session,
        phone="9000000002",
        farmer=_farmer_profile(),
        owner=_owner_profile(),
    )


@pytest.fixture
def farmer_token(farmer_user: User) -> str:
    return create_access_token(user_id=farmer_user.id)


@pytest.fixture
def dual_token(dual_user: User) -> str:
    return create_access_token(user_id=dual_user.id)


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: API endpoint tests")
    config.addinivalue_line("markers", "auth: Authentication tests")


def pytest_sessionfinish(session, exitstatus):
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
