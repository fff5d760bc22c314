"""
Centralized Test Configuration.
"""

import os

# Keep the app's own engine off PostgreSQL while it is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from fleetflow.app.main import app
from fleetflow.app.db.session import get_db, Base
import fleetflow.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        return not self._closed

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        return 1 if self.store.pop(key, None) is not None else 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def aclose(self):
        self._closed = True
        self.store = {}


class BrokenRedis(MockRedis):
    """Redis that is down: every command raises."""

    async def set(self, key, value, ex=None):
        raise ConnectionError("Redis unavailable")

    async def exists(self, key):
        raise ConnectionError("Redis unavailable")


@pytest.fixture
def mock_redis():
    """Swap the module-level Redis client for an in-memory one."""
    original_client = redis_client_module.redis_client
    client = MockRedis()
    redis_client_module.redis_client = client
    yield client
    redis_client_module.redis_client = original_client


@pytest.fixture
def broken_redis(mock_redis):
    """Redis that raises on every write; restored by mock_redis."""
    client = BrokenRedis()
    redis_client_module.redis_client = client
    return client


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def setup_database(engine, session_factory, mock_redis):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    yield

    app.dependency_overrides = {}
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# --- Users and tokens ---

def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Factory: sign a user up through the API and return the response body."""
    async def _signup(role: str, email: str = None, password: str = "password123"):
        payload = {
            "name": f"Test {role}",
            "email": email or f"{role}@test.com",
            "password": password,
            "role": role,
        }
        response = await client.post("/api/auth/signup", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _signup


@pytest.fixture
async def manager_headers(signup):
    return bearer((await signup("manager"))["token"])


@pytest.fixture
async def dispatcher_headers(signup):
    return bearer((await signup("dispatcher"))["token"])


@pytest.fixture
async def safety_headers(signup):
    return bearer((await signup("safety_officer"))["token"])


@pytest.fixture
async def finance_headers(signup):
    return bearer((await signup("financial_analyst"))["token"])


# --- Fleet fixtures ---

@pytest.fixture
def create_vehicle(client, manager_headers):
    """Factory: register a vehicle through the API and return its JSON."""
    async def _create(**overrides):
        payload = {
            "name": "Truck-01",
            "licensePlate": "TK-001",
            "type": "Truck",
            "maxCapacity": 2000,
        }
        payload.update(overrides)
        response = await client.post("/api/vehicles", json=payload, headers=manager_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_driver(client, manager_headers):
    """Factory: register an On Duty driver through the API and return its JSON."""
    async def _create(**overrides):
        payload = {
            "name": "John Doe",
            "email": "john@fleet.com",
            "phone": "555-0101",
            "licenseNumber": "DL-001",
            "licenseExpiry": "2099-01-01T00:00:00Z",
            "licenseCategory": "Truck",
            "status": "On Duty",
        }
        payload.update(overrides)
        response = await client.post("/api/drivers", json=payload, headers=manager_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_trip(client, manager_headers):
    """Factory: create a Draft trip through the API and return its JSON."""
    async def _create(vehicle_id: int, driver_id: int, **overrides):
        payload = {
            "vehicle": vehicle_id,
            "driver": driver_id,
            "origin": "Warehouse A",
            "destination": "Client Site 1",
            "cargoWeight": 500,
        }
        payload.update(overrides)
        response = await client.post("/api/trips", json=payload, headers=manager_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
