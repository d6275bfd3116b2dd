"""
Visitor Analytics App Package
=============================
FastAPI app factory with lifespan, CORS, rate limiting and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from visitor_analytics.config import CORS_ORIGINS, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("visitor_analytics")

# Rate limiter - keyed by client IP
limiter = Limiter(key_func=get_remote_address)

from visitor_analytics.database import database  # noqa: E402
from visitor_analytics.errors import StoreUnavailable  # noqa: E402
from visitor_analytics.responses import error_response  # noqa: E402
from visitor_analytics import state  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.connect()
    logger.info("Record store connected")
    yield
    # Let in-flight fan-out batches land before the pool goes away
    state.analytics.drain(timeout=10)
    state.fanout_executor.shutdown(wait=True)
    await database.disconnect()


app = FastAPI(
    title="Visitor Analytics",
    description="Sensor visitor counts with cached analytics",
    version="0.1.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error(f"Record store unavailable on {request.url.path}: {exc}")
    return error_response("Record store unavailable", status_code=503)


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
from visitor_analytics.routers import health, locations, sensors, visitors, analytics  # noqa: E402

app.include_router(health.router)
app.include_router(locations.router)
app.include_router(sensors.router)
app.include_router(visitors.router)
app.include_router(analytics.router)
