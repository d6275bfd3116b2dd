"""
Location CRUD Endpoints
=======================
Create, list, update and delete locations. Deleting a location removes its
sensors and observations.
"""

from datetime import datetime

import sqlalchemy
from fastapi import APIRouter, HTTPException, Response

from visitor_analytics.database import database, locations, sensors, visitors
from visitor_analytics.responses import isoformat, success_response
from visitor_analytics.schemas import LocationCreate

router = APIRouter()


def location_out(row):
    return {
        "id": row["id"],
        "name": row["name"],
        "address": row["address"],
        "city": row["city"],
        "country": row["country"],
        "created_at": isoformat(row["created_at"]),
        "updated_at": isoformat(row["updated_at"]),
    }


async def fetch_location(location_id: int):
    row = await database.fetch_one(
        sqlalchemy.select(locations).where(locations.c.id == location_id)
    )
    if not row:
        raise HTTPException(status_code=404, detail="Location not found")
    return row


@router.get("/locations")
async def list_locations():
    rows = await database.fetch_all(sqlalchemy.select(locations).order_by(locations.c.id))
    return success_response([location_out(r) for r in rows])


@router.post("/locations", status_code=201)
async def create_location(location: LocationCreate):
    now = datetime.utcnow()
    location_id = await database.execute(
        locations.insert().values(**location.model_dump(), created_at=now, updated_at=now)
    )
    return success_response(location_out(await fetch_location(location_id)), status_code=201)


@router.get("/locations/{location_id}")
async def get_location(location_id: int):
    return success_response(location_out(await fetch_location(location_id)))


@router.put("/locations/{location_id}")
async def update_location(location_id: int, location: LocationCreate):
    await fetch_location(location_id)
    await database.execute(
        locations.update().where(locations.c.id == location_id).values(
            **location.model_dump(), updated_at=datetime.utcnow()
        )
    )
    return success_response(location_out(await fetch_location(location_id)))


@router.delete("/locations/{location_id}", status_code=204)
async def delete_location(location_id: int):
    await fetch_location(location_id)
    await database.execute(visitors.delete().where(visitors.c.location_id == location_id))
    await database.execute(sensors.delete().where(sensors.c.location_id == location_id))
    await database.execute(locations.delete().where(locations.c.id == location_id))
    return Response(status_code=204)
