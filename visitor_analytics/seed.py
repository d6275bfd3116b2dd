"""
Demo Data Seeder
================
Populates the record store with five locations, their sensors, and 30 days
of visitor observations shaped by a day-of-week traffic profile.

Usage:
    python -m visitor_analytics.seed
    python -m visitor_analytics.seed --days 60 --seed 42
"""

import argparse
import asyncio
import logging
import random
from datetime import date, datetime, timedelta

import sqlalchemy
from sqlalchemy import func

from visitor_analytics.database import database, locations, sensors, visitors

logger = logging.getLogger(__name__)

LOCATIONS = [
    {"name": "Main Office Building", "address": "123 Business District", "city": "New York", "country": "USA"},
    {"name": "Branch Office Downtown", "address": "456 Downtown Avenue", "city": "Los Angeles", "country": "USA"},
    {"name": "Corporate Headquarters", "address": "789 Corporate Plaza", "city": "Chicago", "country": "USA"},
    {"name": "Regional Office East", "address": "321 East Side Street", "city": "Miami", "country": "USA"},
    {"name": "Tech Hub Center", "address": "654 Innovation Drive", "city": "San Francisco", "country": "USA"},
]

SENSOR_TYPES = [
    "Motion Sensor",
    "Door Entry Sensor",
    "Infrared Counter",
    "Pressure Mat Sensor",
    "Beam Break Sensor",
    "Camera Counter",
    "RFID Reader",
    "Bluetooth Beacon",
]

SPECIAL_EVENT_DAYS_AGO = (7, 14, 21)


def base_traffic(day: date, rng: random.Random) -> int:
    """Visitor baseline by weekday (Monday=0)."""
    weekday = day.weekday()
    if weekday >= 5:
        return rng.randint(2, 8)      # weekend
    if weekday == 0:
        return rng.randint(15, 35)
    if weekday == 4:
        return rng.randint(10, 25)
    return rng.randint(20, 45)        # Tue-Thu peak


def build_observations(sensor_rows, start: date, end: date, rng: random.Random):
    """Daily observations per sensor, skipping ~30% of sensor-days, plus special event spikes."""
    rows = []
    day = start
    while day <= end:
        for sensor in sensor_rows:
            if rng.randint(1, 10) <= 3:
                continue
            count = max(1, base_traffic(day, rng) + rng.randint(-5, 10))
            rows.append({
                "location_id": sensor["location_id"],
                "sensor_id": sensor["id"],
                "date": day,
                "count": count,
            })
        day += timedelta(days=1)

    for days_ago in SPECIAL_EVENT_DAYS_AGO:
        special = end - timedelta(days=days_ago)
        picked = rng.sample(sensor_rows, min(len(sensor_rows), rng.randint(3, 6)))
        for sensor in picked:
            rows.append({
                "location_id": sensor["location_id"],
                "sensor_id": sensor["id"],
                "date": special,
                "count": rng.randint(50, 100),
            })
    return rows


async def seed(days: int = 30, rng_seed=None):
    rng = random.Random(rng_seed)
    now = datetime.utcnow()

    sensor_rows = []
    for fields in LOCATIONS:
        location_id = await database.execute(
            locations.insert().values(**fields, created_at=now, updated_at=now)
        )
        logger.info(f"Created location: {fields['name']}")

        for i in range(rng.randint(2, 4)):
            name = f"{rng.choice(SENSOR_TYPES)} {i + 1}"
            status = "active" if rng.randint(0, 10) > 1 else "inactive"
            sensor_id = await database.execute(
                sensors.insert().values(
                    name=name, status=status, location_id=location_id,
                    created_at=now, updated_at=now
                )
            )
            sensor_rows.append({"id": sensor_id, "location_id": location_id})
            logger.info(f"Created sensor: {name} at {fields['name']}")

    end = date.today()
    start = end - timedelta(days=days)
    logger.info(f"Generating visitor data from {start} to {end}")

    for row in build_observations(sensor_rows, start, end, rng):
        await database.execute(visitors.insert().values(**row, created_at=now, updated_at=now))

    total_locations = await database.fetch_val(sqlalchemy.select(func.count(locations.c.id)))
    total_sensors = await database.fetch_val(sqlalchemy.select(func.count(sensors.c.id)))
    active_sensors = await database.fetch_val(
        sqlalchemy.select(func.count(sensors.c.id)).where(sensors.c.status == "active")
    )
    records = await database.fetch_val(sqlalchemy.select(func.count(visitors.c.id)))
    total_count = await database.fetch_val(sqlalchemy.select(func.sum(visitors.c.count))) or 0

    logger.info("=== Seeding Complete ===")
    logger.info(f"Locations: {total_locations}")
    logger.info(f"Sensors: {total_sensors} ({active_sensors} active)")
    logger.info(f"Visitor records: {records}")
    logger.info(f"Total visitor count: {total_count}")


async def _main(args):
    await database.connect()
    try:
        await seed(days=args.days, rng_seed=args.seed)
    finally:
        await database.disconnect()


def main():
    parser = argparse.ArgumentParser(description="Seed demo visitor analytics data")
    parser.add_argument("--days", type=int, default=30, help="Days of history to generate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    asyncio.run(_main(args))


if __name__ == "__main__":
    main()
