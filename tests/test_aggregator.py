"""
Aggregator Tests
================
Summary and rollup semantics against an in-memory store.
"""
from datetime import date, timedelta

import pytest

from visitor_analytics.analytics import Aggregator
from visitor_analytics.analytics.aggregator import average_per_day, summarize_by_date
from visitor_analytics.errors import StoreUnavailable

TODAY = date(2026, 3, 10)


def _aggregator(store):
    return Aggregator(store, today=lambda: TODAY)


class TestAveragePerDay:

    def test_zero_days_is_zero(self):
        assert average_per_day(0, 0) == 0
        assert average_per_day(50, 0) == 0

    def test_rounds_to_two_places(self):
        assert average_per_day(10, 3) == 3.33
        assert average_per_day(20, 3) == 6.67


class TestSummarizeByDate:

    def test_groups_and_counts_distinct(self, fake_store):
        fake_store.add(1, 10, TODAY, 5)
        fake_store.add(1, 10, TODAY, 7)     # same location/sensor/date
        fake_store.add(2, 20, TODAY, 3)
        fake_store.add(1, 11, TODAY - timedelta(days=1), 4)

        daily = summarize_by_date(fake_store.observations)

        assert [d.date for d in daily] == [TODAY - timedelta(days=1), TODAY]
        yesterday, today = daily
        assert (yesterday.total_visitors, yesterday.locations_count, yesterday.sensors_count) == (4, 1, 1)
        assert (today.total_visitors, today.locations_count, today.sensors_count) == (15, 2, 2)

    def test_empty(self):
        assert summarize_by_date([]) == []


class TestVisitorSummary:

    @pytest.mark.asyncio
    async def test_empty_store(self, fake_store):
        summary = await _aggregator(fake_store).compute_visitor_summary(7)

        assert summary.total_visitors == 0
        assert summary.average_visitors_per_day == 0
        assert summary.locations_count == 0
        assert summary.active_sensors_count == 0
        assert summary.daily_stats == []

    @pytest.mark.asyncio
    async def test_single_observation(self, fake_store):
        fake_store.location_names = {1: "Lobby"}
        fake_store.sensor_statuses = {10: (1, "active")}
        fake_store.add(1, 10, TODAY, 10)

        summary = await _aggregator(fake_store).compute_visitor_summary(7)

        assert summary.total_visitors == 10
        assert summary.average_visitors_per_day == 10.0
        assert summary.locations_count == 1
        assert summary.active_sensors_count == 1
        assert len(summary.daily_stats) == 1
        assert summary.daily_stats[0].model_dump() == {
            "date": TODAY, "total_visitors": 10, "locations_count": 1, "sensors_count": 1,
        }

    @pytest.mark.asyncio
    async def test_window_includes_boundary_day(self, fake_store):
        fake_store.add(1, 10, TODAY, 10)
        fake_store.add(1, 10, TODAY - timedelta(days=2), 5)
        fake_store.add(1, 10, TODAY - timedelta(days=3), 100)

        summary = await _aggregator(fake_store).compute_visitor_summary(2)

        assert summary.total_visitors == 15
        assert len(summary.daily_stats) == 2

    @pytest.mark.asyncio
    async def test_zero_days_is_today_only(self, fake_store):
        fake_store.add(1, 10, TODAY, 10)
        fake_store.add(1, 10, TODAY - timedelta(days=1), 5)

        summary = await _aggregator(fake_store).compute_visitor_summary(0)

        assert summary.total_visitors == 10

    @pytest.mark.asyncio
    async def test_location_filter_keeps_global_counts(self, fake_store):
        fake_store.location_names = {1: "A", 2: "B"}
        fake_store.sensor_statuses = {10: (1, "active"), 20: (2, "active"), 21: (2, "inactive")}
        fake_store.add(1, 10, TODAY, 10)
        fake_store.add(2, 20, TODAY, 20)

        summary = await _aggregator(fake_store).compute_visitor_summary(7, location_id=1)

        assert summary.total_visitors == 10
        assert summary.daily_stats[0].locations_count == 1
        # Global, unfiltered
        assert summary.locations_count == 2
        assert summary.active_sensors_count == 2

    @pytest.mark.asyncio
    async def test_total_matches_daily_sum_and_average(self, fake_store):
        for offset, count in [(0, 7), (1, 11), (1, 2), (4, 9), (6, 1)]:
            fake_store.add(1 + offset % 2, 10 + offset, TODAY - timedelta(days=offset), count)

        summary = await _aggregator(fake_store).compute_visitor_summary(7)

        assert summary.total_visitors == sum(d.total_visitors for d in summary.daily_stats) == 30
        assert summary.average_visitors_per_day == round(30 / 4, 2)
        assert len({d.date for d in summary.daily_stats}) == len(summary.daily_stats)

    @pytest.mark.asyncio
    async def test_window_larger_than_calendar_covers_all_history(self, fake_store):
        fake_store.add(1, 10, date(1, 1, 2), 4)
        fake_store.add(1, 10, TODAY, 6)

        summary = await _aggregator(fake_store).compute_visitor_summary(10 ** 12)

        assert summary.total_visitors == 10

    @pytest.mark.asyncio
    async def test_negative_days_rejected(self, fake_store):
        with pytest.raises(ValueError):
            await _aggregator(fake_store).compute_visitor_summary(-1)

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, fake_store):
        fake_store.fail = True
        with pytest.raises(StoreUnavailable):
            await _aggregator(fake_store).compute_visitor_summary(7)

    @pytest.mark.asyncio
    async def test_single_snapshot_per_computation(self, fake_store):
        await _aggregator(fake_store).compute_visitor_summary(7)
        assert fake_store.snapshots == 1


class TestLocationStats:

    @pytest.mark.asyncio
    async def test_empty_store(self, fake_store):
        assert await _aggregator(fake_store).compute_location_stats() == []

    @pytest.mark.asyncio
    async def test_sums_counts_per_location(self, fake_store):
        fake_store.location_names = {2: "B", 1: "A", 3: "X"}
        fake_store.sensor_statuses = {10: (1, "active"), 11: (1, "inactive"), 20: (2, "active")}
        fake_store.add(1, 10, TODAY, 5)
        fake_store.add(1, 11, TODAY - timedelta(days=40), 6)
        fake_store.add(2, 20, TODAY, 1)

        stats = await _aggregator(fake_store).compute_location_stats()

        assert [s.model_dump() for s in stats] == [
            {"id": 1, "name": "A", "total_visitors": 11, "sensors_count": 2},
            {"id": 2, "name": "B", "total_visitors": 1, "sensors_count": 1},
            {"id": 3, "name": "X", "total_visitors": 0, "sensors_count": 0},
        ]
