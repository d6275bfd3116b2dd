"""
Visitor analytics core: record store adapter, aggregator and cache-aside orchestrator.
"""

from visitor_analytics.analytics.aggregator import Aggregator
from visitor_analytics.analytics.cache import MISS, KeyValueStore, TimedCache
from visitor_analytics.analytics.orchestrator import CacheOrchestrator, CacheStats
from visitor_analytics.analytics.store import LocationTotals, Observation, RecordStore

__all__ = [
    "Aggregator",
    "CacheOrchestrator",
    "CacheStats",
    "KeyValueStore",
    "LocationTotals",
    "MISS",
    "Observation",
    "RecordStore",
    "TimedCache",
]
