"""
Cache Tier and Key Tests
========================
"""
import pytest

from visitor_analytics.analytics import MISS, KeyValueStore, TimedCache
from visitor_analytics.analytics import keys
from visitor_analytics.errors import CacheUnavailable


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestKeys:

    def test_absent_filter_distinct_from_any_location(self):
        assert keys.summary_key(7) != keys.summary_key(7, 3)
        assert keys.summary_key(7, None) == "visitor_summary:7:all"
        assert keys.summary_key(7, 3) == "visitor_summary:7:3"

    def test_days_distinguish_keys(self):
        assert keys.summary_key(7) != keys.summary_key(30)
        assert keys.summary_key(1, 11) != keys.summary_key(11, 1)

    def test_location_stat_key(self):
        assert keys.location_stat_key(42) == "stat:42"

    def test_scalar_encoding(self):
        assert keys.decode_scalar(keys.encode_scalar(17)) == 17


class TestTimedCache:

    def test_miss_then_hit(self):
        cache = TimedCache()
        assert cache.get("k") is MISS
        cache.set("k", "v", 60)
        assert cache.get("k") == "v"

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = TimedCache(timer=clock)
        cache.set("k", "v", 3600)

        clock.now += 3599
        assert cache.get("k") == "v"
        clock.now += 2
        assert cache.get("k") is MISS

    def test_clear(self):
        cache = TimedCache()
        cache.set("a", 1, 60)
        cache.set("b", 2, 60)
        cache.clear()
        assert cache.get("a") is MISS
        assert len(cache) == 0

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(CacheUnavailable):
            TimedCache().set("k", "v", 0)

    def test_falsy_values_are_hits(self):
        cache = TimedCache()
        cache.set("zero", 0, 60)
        assert cache.get("zero") == 0


class TestKeyValueStore:

    def test_atomic_batch_writes_all_keys(self):
        store = KeyValueStore()
        written = store.atomic_batch([("a", "1", 60), ("b", "2", 60), ("c", "3", 60)])
        assert written == 3
        assert [store.get(k) for k in "abc"] == ["1", "2", "3"]

    def test_invalid_item_writes_nothing(self):
        store = KeyValueStore()
        with pytest.raises(CacheUnavailable):
            store.atomic_batch([("a", "1", 60), ("b", "2", -1)])
        assert store.get("a") is MISS

    def test_batch_entries_expire_with_ttl(self):
        clock = FakeClock()
        store = KeyValueStore(timer=clock)
        store.atomic_batch([("short", "x", 10), ("long", "y", 100)])
        clock.now += 50
        assert store.get("short") is MISS
        assert store.get("long") == "y"
