"""Health check and monitoring endpoints"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import engine, get_pool_stats, log_pool_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/pool")
async def get_pool_health():
    """
    Get connection pool health statistics.

    Returns pool utilization, connection counts, and health status.
    """
    stats = get_pool_stats()
    utilization = log_pool_stats("health check", stats)
    total_capacity = stats["size"] + stats["max_overflow"]

    # Determine health status
    if utilization >= 90:
        status = "critical"
    elif utilization >= 80:
        status = "warning"
    else:
        status = "healthy"

    return {
        "status": status,
        "pool_size": stats["size"],
        "max_overflow": stats["max_overflow"],
        "available": stats["checked_in"],
        "in_use": stats["checked_out"],
        "overflow": stats["overflow"],
        "utilization_percent": round(utilization, 2),
        "total_capacity": total_capacity,
    }


@router.get("/")
async def health_check():
    """
    Basic health check endpoint.

    Reports "degraded" when the database does not answer a trivial query.
    """
    database_ok = True
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        database_ok = False

    return {
        "status": "healthy" if database_ok else "degraded",
        "service": "countdown-timer",
        "database": database_ok,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
