"""
Test fixtures for the Account Management API test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - session_factory: Session maker bound to the test engine, for out-of-band
    changes (e.g. zeroing a balance) made outside the API
  - client: Async HTTP test client with the test database injected
  - customer_a / customer_b: X-Customer-ID headers for two distinct customers
  - create_account: Opens an account through the real POST /accounts endpoint

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) on a single static connection, so
    every session in a test sees the same database and no state leaks
    between tests.
  - We override FastAPI's get_db dependency to inject our test session
    factory, so the application code works exactly as it does in production.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from accounts_api.database import Base, get_db
from accounts_api.main import app


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


def account_payload(**overrides) -> dict:
    """A valid POST /accounts body; keyword arguments replace top-level fields."""
    payload = {
        "accountType": "SAVINGS",
        "currency": "USD",
        "initialDeposit": 1000.00,
        "customerDetails": {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane.doe@example.com",
            "phoneNumber": "+15551234567",
            "address": "1 Main Street, Springfield",
        },
        "accountNickname": "Rainy Day Fund",
        "metadata": {"source": "test"},
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    Async HTTP test client with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def customer_a() -> dict:
    return {"X-Customer-ID": str(uuid.uuid4())}


@pytest.fixture
def customer_b() -> dict:
    return {"X-Customer-ID": str(uuid.uuid4())}


@pytest.fixture
def create_account(client):
    """
    Open an account via the API and return the response JSON.

    Usage:
        account = await create_account(customer_a, accountType="CHECKING")
    """

    async def _create(headers: dict, **overrides) -> dict:
        response = await client.post(
            "/accounts", json=account_payload(**overrides), headers=headers
        )
        assert response.status_code == 201, f"Create failed: {response.text}"
        return response.json()

    return _create


@pytest.fixture
def make_payload():
    """Factory for valid POST /accounts bodies (see account_payload)."""
    return account_payload
