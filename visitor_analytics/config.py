"""
Application Configuration
=========================
Central config loaded from environment variables.
"""

import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./visitor_analytics.db")

# Handle Railway's postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# CORS origins (comma-separated in env, or * for dev)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Analytics cache tiers
ANALYTICS_CACHE_TTL_SECONDS = 3600
ANALYTICS_CACHE_MAXSIZE = int(os.getenv("ANALYTICS_CACHE_MAXSIZE", "1024"))
FANOUT_WORKERS = int(os.getenv("FANOUT_WORKERS", "2"))

# Summary window (days)
DEFAULT_SUMMARY_DAYS = 7

# Pagination
DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100

# Rate limit on observation writes (slowapi syntax)
VISITOR_WRITE_RATE_LIMIT = os.getenv("VISITOR_WRITE_RATE_LIMIT", "600/minute")
