"""
Pytest configuration and fixtures.
Provides test app client, async DB session replacement and signed-in users.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ANON_KEY"] = "test-anon-key"

from dataclasses import dataclass
from typing import Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import ordertracker.models  # noqa: F401
from ordertracker.main import app
from ordertracker.core.security import create_access_token, hash_password
from ordertracker.db.base import Base
from ordertracker.db.session import enable_sqlite_foreign_keys, get_db
from ordertracker.models.user import UserProfile, UserRole


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "secret123"


@dataclass
class SignedInUser:
    """A persisted user plus ready-made auth headers."""
    user: UserProfile
    token: str

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(scope="function")
async def test_session_maker():
    """
    Create a sessionmaker bound to a fresh in-memory database.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """
    Create a test database session.
    Uses in-memory SQLite for fast tests.
    """
    async with test_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def test_client(test_session_maker):
    """
    Create a test HTTP client whose requests use the test database.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_user(test_session_maker):
    """Factory that persists a user and signs them in."""
    async def _create_user(
        email: str,
        role: UserRole = UserRole.USER,
        full_name: Optional[str] = None,
        password: str = TEST_PASSWORD,
    ) -> SignedInUser:
        async with test_session_maker() as session:
            user = UserProfile(
                email=email,
                full_name=full_name,
                role=role,
                password_hash=hash_password(password),
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
        token = create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})
        return SignedInUser(user=user, token=token)
    
    return _create_user


@pytest.fixture(scope="function")
async def alice(create_user) -> SignedInUser:
    return await create_user("alice@example.com", full_name="Alice Smith")


@pytest.fixture(scope="function")
async def bob(create_user) -> SignedInUser:
    return await create_user("bob@example.com", full_name="Bob Jones")


@pytest.fixture(scope="function")
async def admin(create_user) -> SignedInUser:
    return await create_user("admin@example.com", role=UserRole.ADMIN, full_name="Ada Admin")


class ApiHelper:
    """Shortcuts for creating rows through the public API."""
    
    def __init__(self, client: AsyncClient):
        self.client = client
    
    async def create_client(self, user: SignedInUser, **overrides) -> dict:
        payload = {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "address": "1 Main St",
        }
        payload.update(overrides)
        response = await self.client.post("/api/v1/clients", json=payload, headers=user.headers)
        assert response.status_code == 201, response.text
        return response.json()
    
    async def create_order(self, user: SignedInUser, client_id: str, **overrides) -> dict:
        payload = {
            "title": "Kitchen cabinets",
            "description": "Oak, 12 units",
            "client_id": client_id,
            "order_date": "2024-03-01",
            "lead_time_days": 14,
            "total_amount": "1000.00",
        }
        payload.update(overrides)
        response = await self.client.post("/api/v1/orders", json=payload, headers=user.headers)
        assert response.status_code == 201, response.text
        return response.json()
    
    async def create_payment(self, user: SignedInUser, order: dict, **overrides) -> dict:
        payload = {
            "order_id": order["id"],
            "client_id": order["client_id"],
            "amount": "400.00",
            "payment_date": "2024-03-02",
            "payment_method": "cash",
        }
        payload.update(overrides)
        response = await self.client.post("/api/v1/payments", json=payload, headers=user.headers)
        assert response.status_code == 201, response.text
        return response.json()


@pytest.fixture(scope="function")
def api(test_client) -> ApiHelper:
    return ApiHelper(test_client)
