"""
Pytest configuration and fixtures for Visitor Analytics tests.
"""
import os
from contextlib import asynccontextmanager
from datetime import date, datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test database before importing main
os.environ["DATABASE_URL"] = "sqlite:///./test_visitor_analytics.db"
os.environ.setdefault("VISITOR_WRITE_RATE_LIMIT", "10000/minute")

from main import app, database, locations, sensors, visitors, analytics  # noqa: E402
from visitor_analytics.analytics import LocationTotals, Observation  # noqa: E402
from visitor_analytics.errors import StoreUnavailable  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Connected test database with empty tables and cold caches."""
    if not database.is_connected:
        await database.connect()
    for table in (visitors, sensors, locations):
        await database.execute(table.delete())
    analytics.clear()
    analytics.reset_stats()
    yield database
    analytics.drain(timeout=5)
    await database.disconnect()


@pytest_asyncio.fixture
async def client(db):
    """Async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Records:
    """Direct inserts for arranging store contents."""

    async def location(self, name="Test Location"):
        now = datetime.utcnow()
        return await database.execute(
            locations.insert().values(name=name, created_at=now, updated_at=now)
        )

    async def sensor(self, location_id, status="active", name="Door Entry Sensor 1"):
        now = datetime.utcnow()
        return await database.execute(
            sensors.insert().values(
                name=name, status=status, location_id=location_id,
                created_at=now, updated_at=now
            )
        )

    async def observation(self, location_id, sensor_id, count, on=None):
        now = datetime.utcnow()
        return await database.execute(
            visitors.insert().values(
                location_id=location_id, sensor_id=sensor_id,
                date=on or date.today(), count=count,
                created_at=now, updated_at=now
            )
        )


@pytest_asyncio.fixture
async def records(db):
    return Records()


class FakeStore:
    """In-memory stand-in for RecordStore."""

    def __init__(self, observations=(), location_names=None, sensor_statuses=None):
        self.observations = list(observations)
        # {location_id: name}
        self.location_names = dict(location_names or {})
        # {sensor_id: (location_id, status)}
        self.sensor_statuses = dict(sensor_statuses or {})
        self.snapshots = 0
        self.fail = False

    @asynccontextmanager
    async def snapshot(self):
        if self.fail:
            raise StoreUnavailable("store offline")
        self.snapshots += 1
        yield self

    async def query_observations(self, date_from, location_id=None):
        return [
            o for o in self.observations
            if o.date >= date_from and (location_id is None or o.location_id == location_id)
        ]

    async def count_locations(self):
        return len(self.location_names)

    async def count_sensors(self, status=None):
        return sum(1 for _, s in self.sensor_statuses.values() if status is None or s == status)

    async def list_locations_with_counts(self):
        return [
            LocationTotals(
                id=location_id,
                name=name,
                total_visitors=sum(o.count for o in self.observations if o.location_id == location_id),
                sensors_count=sum(1 for loc, _ in self.sensor_statuses.values() if loc == location_id),
            )
            for location_id, name in sorted(self.location_names.items())
        ]

    def add(self, location_id, sensor_id, on, count):
        self.observations.append(Observation(
            id=len(self.observations) + 1,
            location_id=location_id,
            sensor_id=sensor_id,
            date=on,
            count=count,
        ))


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture(scope="session", autouse=True)
def remove_test_database():
    yield
    if os.path.exists("test_visitor_analytics.db"):
        os.remove("test_visitor_analytics.db")
