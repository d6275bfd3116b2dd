"""
Record Store Adapter
====================
Read-only queries over locations, sensors and visitor observations.
Every database failure surfaces as StoreUnavailable.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

import sqlalchemy
from sqlalchemy import func

from visitor_analytics.database import locations, sensors, visitors
from visitor_analytics.errors import StoreUnavailable


@dataclass(frozen=True)
class Observation:
    id: int
    location_id: int
    sensor_id: int
    date: date
    count: int


@dataclass(frozen=True)
class LocationTotals:
    id: int
    name: str
    total_visitors: int
    sensors_count: int


@asynccontextmanager
async def _store_errors(operation: str):
    try:
        yield
    except StoreUnavailable:
        raise
    except Exception as e:
        raise StoreUnavailable(f"{operation} failed: {e}") from e


class RecordStore:
    """Query interface over the `databases` connection owned by the app."""

    def __init__(self, database):
        self._database = database

    @asynccontextmanager
    async def snapshot(self):
        """Run the enclosed queries inside one read transaction."""
        async with _store_errors("snapshot"):
            transaction = await self._database.transaction()
        try:
            yield self
        except BaseException:
            await transaction.rollback()
            raise
        else:
            async with _store_errors("snapshot commit"):
                await transaction.commit()

    async def query_observations(self, date_from: date, location_id: Optional[int] = None) -> List[Observation]:
        query = sqlalchemy.select(
            visitors.c.id, visitors.c.location_id, visitors.c.sensor_id,
            visitors.c.date, visitors.c.count
        ).where(visitors.c.date >= date_from)
        if location_id is not None:
            query = query.where(visitors.c.location_id == location_id)
        query = query.order_by(visitors.c.date, visitors.c.id)

        async with _store_errors("query_observations"):
            rows = await self._database.fetch_all(query)
        return [
            Observation(
                id=r["id"],
                location_id=r["location_id"],
                sensor_id=r["sensor_id"],
                date=r["date"],
                count=r["count"] or 0,
            )
            for r in rows
        ]

    async def count_locations(self) -> int:
        query = sqlalchemy.select(func.count(locations.c.id))
        async with _store_errors("count_locations"):
            return await self._database.fetch_val(query) or 0

    async def count_sensors(self, status: Optional[str] = None) -> int:
        query = sqlalchemy.select(func.count(sensors.c.id))
        if status is not None:
            query = query.where(sensors.c.status == status)
        async with _store_errors("count_sensors"):
            return await self._database.fetch_val(query) or 0

    async def list_locations_with_counts(self) -> List[LocationTotals]:
        """Every location with its summed visitor count and sensor count, in id order."""
        visitor_total = sqlalchemy.select(
            func.coalesce(func.sum(visitors.c.count), 0)
        ).where(visitors.c.location_id == locations.c.id).scalar_subquery()
        sensor_count = sqlalchemy.select(
            func.count(sensors.c.id)
        ).where(sensors.c.location_id == locations.c.id).scalar_subquery()

        query = sqlalchemy.select(
            locations.c.id,
            locations.c.name,
            visitor_total.label("total_visitors"),
            sensor_count.label("sensors_count"),
        ).order_by(locations.c.id)

        async with _store_errors("list_locations_with_counts"):
            rows = await self._database.fetch_all(query)
        return [
            LocationTotals(
                id=r["id"],
                name=r["name"],
                total_visitors=int(r["total_visitors"] or 0),
                sensors_count=int(r["sensors_count"] or 0),
            )
            for r in rows
        ]
