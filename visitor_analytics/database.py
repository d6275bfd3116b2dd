"""
Database Setup
==============
SQLAlchemy table definitions, async database connection, and engine.
Locations own sensors; visitor observations belong to one location and one sensor.
"""

from datetime import datetime

import databases
import sqlalchemy

from visitor_analytics.config import DATABASE_URL

database = databases.Database(DATABASE_URL)

metadata = sqlalchemy.MetaData()

locations = sqlalchemy.Table(
    "locations",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("name", sqlalchemy.String(255), nullable=False),
    sqlalchemy.Column("address", sqlalchemy.String(500), nullable=True),
    sqlalchemy.Column("city", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("country", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

sensors = sqlalchemy.Table(
    "sensors",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("name", sqlalchemy.String(255), nullable=False),
    sqlalchemy.Column("status", sqlalchemy.String(20), index=True, default="active"),
    sqlalchemy.Column("location_id", sqlalchemy.Integer, sqlalchemy.ForeignKey("locations.id"), index=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

# Visitor observations - one count reading per (location, sensor, date), duplicates allowed
visitors = sqlalchemy.Table(
    "visitors",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("location_id", sqlalchemy.Integer, sqlalchemy.ForeignKey("locations.id"), index=True),
    sqlalchemy.Column("sensor_id", sqlalchemy.Integer, sqlalchemy.ForeignKey("sensors.id"), index=True),
    sqlalchemy.Column("date", sqlalchemy.Date, index=True),
    sqlalchemy.Column("count", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

engine = sqlalchemy.create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
)
metadata.create_all(engine)
