"""
Visitor Observation Endpoints
=============================
Ingest and manage visitor-count observations. Listing is paginated, newest
date first, with location and sensor embedded. Writes do not touch the
analytics caches.
"""

from datetime import datetime

import sqlalchemy
from sqlalchemy import func
from fastapi import APIRouter, HTTPException, Query, Request, Response

from visitor_analytics import limiter
from visitor_analytics.config import DEFAULT_PER_PAGE, MAX_PER_PAGE, VISITOR_WRITE_RATE_LIMIT
from visitor_analytics.database import database, sensors, visitors
from visitor_analytics.responses import isoformat, paginate, success_response
from visitor_analytics.routers.locations import location_out
from visitor_analytics.routers.sensors import locations_by_id, require_location, sensor_out
from visitor_analytics.schemas import VisitorCreate

router = APIRouter()


def visitor_out(row, related_locations, related_sensors):
    data = {
        "id": row["id"],
        "location_id": row["location_id"],
        "sensor_id": row["sensor_id"],
        "date": isoformat(row["date"]),
        "count": row["count"],
        "created_at": isoformat(row["created_at"]),
        "updated_at": isoformat(row["updated_at"]),
    }
    location = related_locations.get(row["location_id"])
    if location is not None:
        data["location"] = location_out(location)
    sensor = related_sensors.get(row["sensor_id"])
    if sensor is not None:
        data["sensor"] = sensor_out(sensor)
    return data


async def sensors_by_id(sensor_ids):
    if not sensor_ids:
        return {}
    rows = await database.fetch_all(
        sqlalchemy.select(sensors).where(sensors.c.id.in_(set(sensor_ids)))
    )
    return {r["id"]: r for r in rows}


async def require_sensor(sensor_id: int):
    exists = await database.fetch_val(
        sqlalchemy.select(func.count(sensors.c.id)).where(sensors.c.id == sensor_id)
    )
    if not exists:
        raise HTTPException(status_code=422, detail=f"Sensor {sensor_id} does not exist")


async def fetch_visitor(visitor_id: int):
    row = await database.fetch_one(
        sqlalchemy.select(visitors).where(visitors.c.id == visitor_id)
    )
    if not row:
        raise HTTPException(status_code=404, detail="Visitor record not found")
    return row


async def _expand(rows):
    related_locations = await locations_by_id([r["location_id"] for r in rows])
    related_sensors = await sensors_by_id([r["sensor_id"] for r in rows])
    return [visitor_out(r, related_locations, related_sensors) for r in rows]


@router.get("/visitors")
async def list_visitors(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1),
):
    per_page = min(per_page, MAX_PER_PAGE)

    total = await database.fetch_val(
        sqlalchemy.select(func.count()).select_from(visitors)
    ) or 0
    rows = await database.fetch_all(
        sqlalchemy.select(visitors).order_by(visitors.c.date.desc(), visitors.c.id.desc())
        .limit(per_page).offset((page - 1) * per_page)
    )
    return success_response(await _expand(rows), pagination=paginate(page, per_page, total))


@router.post("/visitors", status_code=201)
@limiter.limit(VISITOR_WRITE_RATE_LIMIT)
async def create_visitor(request: Request, visitor: VisitorCreate):
    """Record one observation; location and sensor must already exist."""
    await require_location(visitor.location_id)
    await require_sensor(visitor.sensor_id)
    now = datetime.utcnow()
    visitor_id = await database.execute(
        visitors.insert().values(**visitor.model_dump(), created_at=now, updated_at=now)
    )
    items = await _expand([await fetch_visitor(visitor_id)])
    return success_response(items[0], status_code=201)


@router.get("/visitors/{visitor_id}")
async def get_visitor(visitor_id: int):
    items = await _expand([await fetch_visitor(visitor_id)])
    return success_response(items[0])


@router.put("/visitors/{visitor_id}")
@limiter.limit(VISITOR_WRITE_RATE_LIMIT)
async def update_visitor(request: Request, visitor_id: int, visitor: VisitorCreate):
    await fetch_visitor(visitor_id)
    await require_location(visitor.location_id)
    await require_sensor(visitor.sensor_id)
    await database.execute(
        visitors.update().where(visitors.c.id == visitor_id).values(
            **visitor.model_dump(), updated_at=datetime.utcnow()
        )
    )
    items = await _expand([await fetch_visitor(visitor_id)])
    return success_response(items[0])


@router.delete("/visitors/{visitor_id}", status_code=204)
async def delete_visitor(visitor_id: int):
    await fetch_visitor(visitor_id)
    await database.execute(visitors.delete().where(visitors.c.id == visitor_id))
    return Response(status_code=204)
