"""
Shared fixtures: an application wired to in-memory SQLite and a fake redis.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.database import Database
from app.main import create_app


class FakeRedis:
    """Stands in for ``redis.asyncio.Redis`` in health checks."""

    def __init__(self, healthy: bool = True):
        self.healthy = healthy
        self.closed = False

    async def ping(self) -> bool:
        if not self.healthy:
            raise ConnectionError("redis unavailable")
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def make_client():
    """Build a TestClient with its own database; redis health is configurable."""
    clients = []

    def _make(redis_healthy: bool = True) -> TestClient:
        database = Database(
            "sqlite+aiosqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        app = create_app(database=database, redis_client=FakeRedis(healthy=redis_healthy))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def restaurant(client):
    """A restaurant in New York, created through the API."""
    response = client.post("/api/restaurants", json={
        "name": "Pizza Palace",
        "slug": "pizza-palace",
        "description": "Wood-fired pizza",
        "phone": "555-123-4567",
        "addressLine1": "350 Fifth Avenue",
        "city": "New York",
        "state": "NY",
        "postalCode": "10118",
    })
    assert response.status_code == 201
    return response.json()
