"""
Visitor Aggregator
==================
Derives the windowed visitor summary and the per-location rollup from raw
observations. Pure reads: nothing here writes to the store or the caches.
"""

from datetime import date, timedelta
from typing import Callable, List, Optional

from visitor_analytics.schemas import DailySummary, LocationStat, VisitorSummary


def average_per_day(total: int, days_with_data: int) -> float:
    if days_with_data == 0:
        return 0
    return round(total / days_with_data, 2)


def summarize_by_date(observations) -> List[DailySummary]:
    """Group observations by date: summed count plus distinct locations and sensors."""
    by_date = {}
    for obs in observations:
        bucket = by_date.setdefault(obs.date, {"total": 0, "locations": set(), "sensors": set()})
        bucket["total"] += obs.count
        bucket["locations"].add(obs.location_id)
        bucket["sensors"].add(obs.sensor_id)

    return [
        DailySummary(
            date=day,
            total_visitors=bucket["total"],
            locations_count=len(bucket["locations"]),
            sensors_count=len(bucket["sensors"]),
        )
        for day, bucket in sorted(by_date.items())
    ]


class Aggregator:

    def __init__(self, store, today: Callable[[], date] = date.today):
        self._store = store
        self._today = today

    async def compute_visitor_summary(self, days: int, location_id: Optional[int] = None) -> VisitorSummary:
        """
        Summarize observations dated within the last `days` days.

        Daily stats honor `location_id`; locations_count and
        active_sensors_count are global counts regardless of the filter.
        """
        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")
        today = self._today()
        # Windows reaching past the calendar start cover all history
        date_from = today - timedelta(days=min(days, (today - date.min).days))

        async with self._store.snapshot() as store:
            observations = await store.query_observations(date_from, location_id)
            locations_count = await store.count_locations()
            active_sensors = await store.count_sensors("active")

        daily_stats = summarize_by_date(observations)
        total = sum(d.total_visitors for d in daily_stats)

        return VisitorSummary(
            total_visitors=total,
            average_visitors_per_day=average_per_day(total, len(daily_stats)),
            locations_count=locations_count,
            active_sensors_count=active_sensors,
            daily_stats=daily_stats,
        )

    async def compute_location_stats(self) -> List[LocationStat]:
        async with self._store.snapshot() as store:
            rows = await store.list_locations_with_counts()
        return [
            LocationStat(
                id=r.id,
                name=r.name,
                total_visitors=r.total_visitors,
                sensors_count=r.sensors_count,
            )
            for r in rows
        ]
