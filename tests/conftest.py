"""Pytest fixtures and configuration"""

import os

# Settings are read at import time; point them at SQLite before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (AsyncSession,  # noqa: E402
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402,F401
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh in-memory database for each test.
    Tables are created before and dropped after the test.
    """
    # One shared connection so every session sees the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database session override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def group_payload() -> dict:
    """Payload for a three-member group created by Alice"""
    return {
        "name": "Weekend Trip",
        "description": "Shared costs",
        "creator": {"id": "alice", "name": "Alice", "email": "alice@example.com"},
        "members": [
            {"id": "bob", "name": "Bob"},
            {"id": "carol", "name": "Carol", "phone": "+91 98765 43210"},
        ],
    }


@pytest_asyncio.fixture
async def test_group(client: AsyncClient, group_payload: dict) -> dict:
    """Create the three-member group through the API"""
    response = await client.post("/api/v1/groups", json=group_payload)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def create_expense(client: AsyncClient):
    """Helper to post an expense to a group"""

    async def _create_expense(group_id: str, **overrides):
        expense_data = {
            "description": "Dinner",
            "amount": "300.00",
            "paid_by": "alice",
            "category": "Food & Dining",
            "expense_date": "2024-03-01",
            "split_type": "equal",
        }
        expense_data.update(overrides)
        return await client.post(f"/api/v1/groups/{group_id}/expenses", json=expense_data)

    return _create_expense
