"""
Analytics Errors
================
Failure taxonomy for the aggregation and cache layers.
"""


class AnalyticsError(Exception):
    """Base class for analytics failures."""


class StoreUnavailable(AnalyticsError):
    """The record store could not answer a query."""


class CacheUnavailable(AnalyticsError):
    """A cache tier could not be read or written."""


class SecondaryWriteFailure(AnalyticsError):
    """A fan-out batch to the fast key-value store did not land."""

    def __init__(self, keys, cause=None):
        self.keys = list(keys)
        self.cause = cause
        super().__init__(f"fan-out write failed for {len(self.keys)} keys: {cause}")
