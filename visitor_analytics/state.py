"""
Shared Service State
====================
Process-wide analytics collaborators, built once and owned by the app lifespan.
Routers reach them through get_analytics() so tests can swap them out.
"""

from concurrent.futures import ThreadPoolExecutor

from visitor_analytics.analytics import Aggregator, CacheOrchestrator, KeyValueStore, RecordStore, TimedCache
from visitor_analytics.config import ANALYTICS_CACHE_MAXSIZE, FANOUT_WORKERS
from visitor_analytics.database import database

record_store = RecordStore(database)
primary_cache = TimedCache(maxsize=ANALYTICS_CACHE_MAXSIZE)
fast_store = KeyValueStore(maxsize=ANALYTICS_CACHE_MAXSIZE)
fanout_executor = ThreadPoolExecutor(max_workers=FANOUT_WORKERS, thread_name_prefix="cache-fanout")

analytics = CacheOrchestrator(
    aggregator=Aggregator(record_store),
    primary_cache=primary_cache,
    fast_store=fast_store,
    executor=fanout_executor,
)


def get_analytics() -> CacheOrchestrator:
    return analytics
