"""
Cache Keys and Serialization
============================
Key derivation for both cache tiers and JSON encoding for fast-store values.
"""

import json
from typing import Optional

LOCATION_STATS_KEY = "location_stats"
# Scalar keys are rewritten by every summary miss, so they mirror the most
# recently computed (days, location) pair rather than a fixed global view
TOTAL_VISITORS_KEY = "summary:total_visitors"
LOCATIONS_COUNT_KEY = "summary:locations_count"
ACTIVE_SENSORS_KEY = "summary:active_sensors_count"

# Location filter placeholder; never a valid integer id
ALL_LOCATIONS = "all"


def summary_key(days: int, location_id: Optional[int] = None) -> str:
    location_part = ALL_LOCATIONS if location_id is None else str(int(location_id))
    return f"visitor_summary:{int(days)}:{location_part}"


def location_stat_key(location_id: int) -> str:
    return f"stat:{int(location_id)}"


def encode_scalar(value) -> str:
    return json.dumps(value)


def decode_scalar(raw: str):
    return json.loads(raw)
