"""
Visitor Analytics - API Entry Point
===================================
Sensor visitor-count records with cached analytics.

Run locally:
    python -m visitor_analytics.seed
    python main.py
"""

import os

from visitor_analytics import app
from visitor_analytics.database import database, metadata, locations, sensors, visitors
from visitor_analytics.state import analytics

__all__ = ["app", "database", "metadata", "locations", "sensors", "visitors", "analytics"]


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
