"""
Pydantic Models
===============
Request schemas for the record endpoints and the derived analytics views.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, TypeAdapter


class LocationCreate(BaseModel):
    """Create or replace a location."""
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)


class SensorCreate(BaseModel):
    """Create or replace a sensor attached to a location."""
    name: str = Field(..., min_length=1, max_length=255)
    status: Literal["active", "inactive"]
    location_id: int


class VisitorCreate(BaseModel):
    """One visitor-count observation from a sensor."""
    location_id: int
    sensor_id: int
    date: date
    count: int = Field(..., ge=0)


class DailySummary(BaseModel):
    date: date
    total_visitors: int
    locations_count: int
    sensors_count: int


class VisitorSummary(BaseModel):
    """Windowed visitor summary served by /analytics/summary."""
    total_visitors: int
    average_visitors_per_day: float
    locations_count: int
    active_sensors_count: int
    daily_stats: List[DailySummary]


class LocationStat(BaseModel):
    id: int
    name: str
    total_visitors: int
    sensors_count: int


LocationStatList = TypeAdapter(List[LocationStat])
