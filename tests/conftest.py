"""Shared test fixtures for SalonQueue API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

# Must be set before anything imports app.core.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("SENDGRID_API_KEY", "")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.core.database import Base, engine, async_session, get_db
from app.core.permissions import Role
from app.main import app
from app.services.realtime import change_feed

# Import all models to ensure they're registered with Base.metadata
from app.models.business import Business
from app.models.user import User
from app.models.staff import Staff
from app.models.service import Service
from app.models.appointment import Appointment  # noqa: F401
from app.models.queue_entry import QueueEntry  # noqa: F401
from app.services.auth import hash_password

PASSWORD = "testpass123"


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # Next test runs on a fresh event loop; don't carry the connection over
    await engine.dispose()
    change_feed._subscribers.clear()


async def override_get_db():
    async with async_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def business(db):
    """A salon on UTC with default hours (09:00-19:00 every day)."""
    biz = Business(
        name="Luxe Salon",
        slug="luxe-salon",
        phone="+15550001111",
        address="1 Main St",
        timezone="UTC",
        is_active=True,
    )
    db.add(biz)
    await db.commit()
    await db.refresh(biz)
    return biz


@pytest_asyncio.fixture
async def service(db, business):
    svc = Service(business_id=business.id, name="Haircut", duration_minutes=30, price=25.0)
    db.add(svc)
    await db.commit()
    await db.refresh(svc)
    return svc


@pytest_asyncio.fixture
async def staff(db, business):
    member = Staff(business_id=business.id, name="Dana")
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member


async def _create_user(db, email: str, role: Role, business_id=None) -> User:
    user = User(
        email=email,
        hashed_password=hash_password(PASSWORD),
        full_name=email.split("@")[0].title(),
        business_id=business_id,
        role=role.value,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def _login(client, email: str) -> dict:
    resp = await client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest_asyncio.fixture
async def admin_headers(client, db, business):
    await _create_user(db, "owner@luxe.example.com", Role.BUSINESS_ADMIN, business.id)
    return await _login(client, "owner@luxe.example.com")


@pytest_asyncio.fixture
async def staff_headers(client, db, business):
    await _create_user(db, "stylist@luxe.example.com", Role.STAFF, business.id)
    return await _login(client, "stylist@luxe.example.com")


@pytest_asyncio.fixture
async def super_headers(client, db):
    await _create_user(db, "root@salonqueue.example.com", Role.SUPER_ADMIN)
    return await _login(client, "root@salonqueue.example.com")
