"""
Analytics Endpoints
===================
Cached visitor summary and per-location rollups. Bodies are bare JSON models.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from visitor_analytics.analytics import CacheOrchestrator
from visitor_analytics.config import DEFAULT_SUMMARY_DAYS
from visitor_analytics.schemas import LocationStat, VisitorSummary
from visitor_analytics.state import get_analytics

router = APIRouter(prefix="/analytics")


@router.get("/summary")
async def get_summary(
    days: int = Query(default=DEFAULT_SUMMARY_DAYS, ge=0),
    location_id: Optional[int] = Query(default=None, ge=1),
    analytics: CacheOrchestrator = Depends(get_analytics),
) -> VisitorSummary:
    """Visitor totals and daily breakdown for the last `days` days."""
    return await analytics.get_visitor_summary(days, location_id)


@router.get("/location-stats")
async def get_location_stats(
    analytics: CacheOrchestrator = Depends(get_analytics),
) -> List[LocationStat]:
    """Visitor total and sensor count for every location."""
    return await analytics.get_location_stats()


@router.get("/location-stats/{location_id}")
async def get_location_stat(
    location_id: int,
    analytics: CacheOrchestrator = Depends(get_analytics),
) -> LocationStat:
    stat = await analytics.get_location_stat(location_id)
    if stat is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return stat
