"""
Analytics Cache Orchestrator
============================
Cache-aside over the two derived views.

On a miss the Aggregator runs, the result goes into the primary TTL cache,
and a single atomic batch fans it out into the fast key-value store. The
batch runs on a worker thread and is best-effort: failures are logged and
counted, the caller still gets the computed value. Nothing here invalidates
entries; staleness is bounded by the TTL only.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import asdict, dataclass
from typing import List, Optional

from visitor_analytics.analytics import keys
from visitor_analytics.analytics.cache import MISS
from visitor_analytics.config import ANALYTICS_CACHE_TTL_SECONDS
from visitor_analytics.errors import CacheUnavailable, SecondaryWriteFailure
from visitor_analytics.schemas import LocationStat, LocationStatList, VisitorSummary

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    computations: int = 0
    primary_errors: int = 0
    fanout_writes: int = 0
    fanout_failures: int = 0


def _apply_batch(fast_store, items):
    try:
        return fast_store.atomic_batch(items)
    except Exception as e:
        raise SecondaryWriteFailure([key for key, _, _ in items], e) from e


class CacheOrchestrator:

    def __init__(self, aggregator, primary_cache, fast_store, executor: Optional[ThreadPoolExecutor] = None,
                 ttl: int = ANALYTICS_CACHE_TTL_SECONDS):
        self._aggregator = aggregator
        self._primary = primary_cache
        self._fast = fast_store
        self._executor = executor
        self._ttl = ttl
        self._pending = set()
        self._lock = threading.Lock()
        self.stats = CacheStats()

    # ------------------------------------------------------------------
    # Cached views
    # ------------------------------------------------------------------

    async def get_visitor_summary(self, days: int, location_id: Optional[int] = None) -> VisitorSummary:
        key = keys.summary_key(days, location_id)
        cached = self._lookup(key)
        if cached is not MISS:
            return VisitorSummary.model_validate_json(cached)

        summary = await self._aggregator.compute_visitor_summary(days, location_id)
        self._count("computations")
        payload = summary.model_dump_json()
        self._store(key, payload)
        self._fan_out([
            (key, payload, self._ttl),
            (keys.TOTAL_VISITORS_KEY, keys.encode_scalar(summary.total_visitors), self._ttl),
            (keys.LOCATIONS_COUNT_KEY, keys.encode_scalar(summary.locations_count), self._ttl),
            (keys.ACTIVE_SENSORS_KEY, keys.encode_scalar(summary.active_sensors_count), self._ttl),
        ])
        return VisitorSummary.model_validate_json(payload)

    async def get_location_stats(self) -> List[LocationStat]:
        key = keys.LOCATION_STATS_KEY
        cached = self._lookup(key)
        if cached is not MISS:
            return LocationStatList.validate_json(cached)

        stats = await self._aggregator.compute_location_stats()
        self._count("computations")
        payload = LocationStatList.dump_json(stats).decode()
        self._store(key, payload)

        items = [(key, payload, self._ttl)]
        items.extend(
            (keys.location_stat_key(stat.id), stat.model_dump_json(), self._ttl)
            for stat in stats
        )
        self._fan_out(items)
        return LocationStatList.validate_json(payload)

    async def get_location_stat(self, location_id: int) -> Optional[LocationStat]:
        """Single location's stats from its fan-out key, falling back to the full rollup."""
        try:
            raw = self._fast.get(keys.location_stat_key(location_id))
        except CacheUnavailable as e:
            logger.warning(f"Fast store read failed for location {location_id}: {e}")
            raw = MISS
        if raw is not MISS:
            return LocationStat.model_validate_json(raw)

        for stat in await self.get_location_stats():
            if stat.id == location_id:
                return stat
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def drain(self, timeout: Optional[float] = None):
        """Block until every submitted fan-out batch has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def clear(self):
        """Drop both tiers. Hosting service and tests only."""
        self.drain()
        self._primary.clear()
        self._fast.clear()

    def reset_stats(self):
        with self._lock:
            self.stats = CacheStats()

    def snapshot_stats(self) -> dict:
        with self._lock:
            return asdict(self.stats)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _count(self, field: str):
        with self._lock:
            setattr(self.stats, field, getattr(self.stats, field) + 1)

    def _lookup(self, key: str):
        try:
            cached = self._primary.get(key)
        except CacheUnavailable as e:
            # Fail open: an unreachable cache is a miss
            self._count("primary_errors")
            logger.warning(f"Primary cache read failed for {key}: {e}")
            cached = MISS

        if cached is MISS:
            self._count("misses")
            logger.debug(f"Cache miss: {key}")
        else:
            self._count("hits")
        return cached

    def _store(self, key: str, payload: str):
        try:
            self._primary.set(key, payload, self._ttl)
        except CacheUnavailable as e:
            self._count("primary_errors")
            logger.error(f"Primary cache write failed for {key}: {e}")

    def _fan_out(self, items):
        if self._executor is None:
            self._on_batch_done(items, _run_inline(self._fast, items))
            return

        try:
            future = self._executor.submit(_apply_batch, self._fast, items)
        except RuntimeError as e:
            # Executor already shut down
            self._record_failure(SecondaryWriteFailure([k for k, _, _ in items], e))
            return

        with self._lock:
            self._pending.add(future)
        future.add_done_callback(lambda f: self._finish(f, items))

    def _finish(self, future, items):
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            self._record_failure(SecondaryWriteFailure([k for k, _, _ in items], "cancelled"))
            return
        self._on_batch_done(items, future.exception())

    def _on_batch_done(self, items, error):
        if error is None:
            self._count("fanout_writes")
            logger.debug(f"Fan-out wrote {len(items)} keys")
        else:
            self._record_failure(error)

    def _record_failure(self, error):
        self._count("fanout_failures")
        logger.error(f"Fan-out batch failed: {error}")


def _run_inline(fast_store, items):
    try:
        _apply_batch(fast_store, items)
    except SecondaryWriteFailure as e:
        return e
    return None
