"""
Health Check Router
===================
Liveness endpoint for load balancers, with analytics cache counters.
"""

from datetime import datetime

from fastapi import APIRouter

from visitor_analytics.state import analytics

router = APIRouter()


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "cache": analytics.snapshot_stats(),
    }
