"""
Sensor CRUD Endpoints
=====================
Paginated sensor listing with the owning location embedded, plus create,
update and delete. Deleting a sensor removes its observations.
"""

from datetime import datetime

import sqlalchemy
from sqlalchemy import func
from fastapi import APIRouter, HTTPException, Query, Response

from visitor_analytics.config import DEFAULT_PER_PAGE, MAX_PER_PAGE
from visitor_analytics.database import database, locations, sensors, visitors
from visitor_analytics.responses import isoformat, paginate, success_response
from visitor_analytics.routers.locations import location_out
from visitor_analytics.schemas import SensorCreate

router = APIRouter()


def sensor_out(row, location=None):
    data = {
        "id": row["id"],
        "name": row["name"],
        "status": row["status"],
        "location_id": row["location_id"],
        "created_at": isoformat(row["created_at"]),
        "updated_at": isoformat(row["updated_at"]),
    }
    if location is not None:
        data["location"] = location_out(location)
    return data


async def fetch_sensor(sensor_id: int):
    row = await database.fetch_one(
        sqlalchemy.select(sensors).where(sensors.c.id == sensor_id)
    )
    if not row:
        raise HTTPException(status_code=404, detail="Sensor not found")
    return row


async def locations_by_id(location_ids):
    if not location_ids:
        return {}
    rows = await database.fetch_all(
        sqlalchemy.select(locations).where(locations.c.id.in_(set(location_ids)))
    )
    return {r["id"]: r for r in rows}


async def require_location(location_id: int):
    """Reject references to unknown locations with a validation error."""
    exists = await database.fetch_val(
        sqlalchemy.select(func.count(locations.c.id)).where(locations.c.id == location_id)
    )
    if not exists:
        raise HTTPException(status_code=422, detail=f"Location {location_id} does not exist")


async def _sensor_with_location(sensor_id: int):
    row = await fetch_sensor(sensor_id)
    related = await locations_by_id([row["location_id"]])
    return sensor_out(row, related.get(row["location_id"]))


@router.get("/sensors")
async def list_sensors(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1),
):
    per_page = min(per_page, MAX_PER_PAGE)

    total = await database.fetch_val(
        sqlalchemy.select(func.count()).select_from(sensors)
    ) or 0
    rows = await database.fetch_all(
        sqlalchemy.select(sensors).order_by(sensors.c.id)
        .limit(per_page).offset((page - 1) * per_page)
    )
    related = await locations_by_id([r["location_id"] for r in rows])
    items = [sensor_out(r, related.get(r["location_id"])) for r in rows]
    return success_response(items, pagination=paginate(page, per_page, total))


@router.post("/sensors", status_code=201)
async def create_sensor(sensor: SensorCreate):
    await require_location(sensor.location_id)
    now = datetime.utcnow()
    sensor_id = await database.execute(
        sensors.insert().values(**sensor.model_dump(), created_at=now, updated_at=now)
    )
    return success_response(await _sensor_with_location(sensor_id), status_code=201)


@router.get("/sensors/{sensor_id}")
async def get_sensor(sensor_id: int):
    return success_response(await _sensor_with_location(sensor_id))


@router.put("/sensors/{sensor_id}")
async def update_sensor(sensor_id: int, sensor: SensorCreate):
    await fetch_sensor(sensor_id)
    await require_location(sensor.location_id)
    await database.execute(
        sensors.update().where(sensors.c.id == sensor_id).values(
            **sensor.model_dump(), updated_at=datetime.utcnow()
        )
    )
    return success_response(await _sensor_with_location(sensor_id))


@router.delete("/sensors/{sensor_id}", status_code=204)
async def delete_sensor(sensor_id: int):
    await fetch_sensor(sensor_id)
    await database.execute(visitors.delete().where(visitors.c.sensor_id == sensor_id))
    await database.execute(sensors.delete().where(sensors.c.id == sensor_id))
    return Response(status_code=204)
