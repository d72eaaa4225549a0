"""Database session configuration"""

import logging
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.config import (
    DATABASE_URL,
    POOL_SIZE,
    MAX_OVERFLOW,
    POOL_TIMEOUT,
    POOL_RECYCLE,
)

logger = logging.getLogger(__name__)

if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is not set")


def to_async_url(database_url: str) -> str:
    """
    Convert a database URL to its async driver form.

    Handles both postgresql:// and postgresql+psycopg:// formats; SQLite URLs
    must already name the aiosqlite driver.
    """
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgresql+psycopg://"):
        return database_url
    if database_url.startswith("sqlite+aiosqlite://"):
        return database_url
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    raise ValueError(f"Unsupported database URL format: {database_url}")


ASYNC_DATABASE_URL = to_async_url(DATABASE_URL)
IS_SQLITE = ASYNC_DATABASE_URL.startswith("sqlite")


def _engine_options() -> dict:
    """Pool options for the async engine. SQLite picks its own pool class."""
    if IS_SQLITE:
        return {"echo": False}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": POOL_SIZE,
        "max_overflow": MAX_OVERFLOW,
        "pool_timeout": POOL_TIMEOUT,
        "pool_recycle": POOL_RECYCLE,
        "echo": False,  # Set to True to see SQL queries in logs
    }


# Create async SQLAlchemy engine with connection pooling
engine = create_async_engine(ASYNC_DATABASE_URL, **_engine_options())

# Create async session factory
SessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI routes.

    Usage:
        @app.get("/example")
        async def example(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models() -> None:
    """Create any missing tables for the registered ORM models."""
    from app.db.base import Base
    import app.db.models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


def get_pool_stats() -> dict:
    """
    Get current connection pool statistics.

    Returns:
        Dictionary with pool statistics:
        - size: Total pool size
        - checked_in: Connections currently checked in (available)
        - checked_out: Connections currently checked out (in use)
        - overflow: Overflow connections
        - max_overflow: Configured overflow ceiling
    """
    try:
        # For async engines, access the underlying sync pool
        sync_pool = engine.sync_engine.pool

        # SQLite pools don't expose every counter
        size_func = getattr(sync_pool, "size", None)
        checkedin_func = getattr(sync_pool, "checkedin", None)
        checkedout_func = getattr(sync_pool, "checkedout", None)
        overflow_func = getattr(sync_pool, "overflow", None)

        size_val = size_func() if callable(size_func) else POOL_SIZE
        checked_in_val = checkedin_func() if callable(checkedin_func) else 0
        checked_out_val = checkedout_func() if callable(checkedout_func) else 0
        overflow_val = overflow_func() if callable(overflow_func) else 0
        max_overflow_val = getattr(sync_pool, "_max_overflow", MAX_OVERFLOW)

        return {
            "size": int(size_val),
            "checked_in": int(checked_in_val),
            "checked_out": int(checked_out_val),
            "overflow": max(0, int(overflow_val)),
            "max_overflow": max(0, int(max_overflow_val)),
        }
    except Exception as e:
        logger.warning(f"Error getting pool stats: {e}")
        # Return safe defaults if pool stats can't be accessed
        return {
            "size": POOL_SIZE,
            "checked_in": 0,
            "checked_out": 0,
            "overflow": 0,
            "max_overflow": MAX_OVERFLOW,
        }


def log_pool_stats(context: str = "", stats: Optional[dict] = None) -> float:
    """
    Log current pool usage and return the utilization percentage.

    Utilization is checked-out connections over pool_size + max_overflow.
    """
    if stats is None:
        stats = get_pool_stats()
    total_capacity = stats["size"] + stats["max_overflow"]
    utilization = (stats["checked_out"] / total_capacity * 100) if total_capacity > 0 else 0.0

    label = f" [{context}]" if context else ""
    logger.info(
        f"Pool{label}: {stats['checked_out']} in use, {stats['checked_in']} idle, "
        f"overflow {stats['overflow']}, {utilization:.1f}% of {total_capacity}"
    )
    if utilization > 80:
        logger.warning(f"Pool{label} utilization high: {utilization:.1f}%")
    return utilization


# Add event listeners to monitor connection pool activity
# Note: For async engines, we listen to the sync_engine
from sqlalchemy import event  # noqa: E402

@event.listens_for(engine.sync_engine, "connect")
def on_connect(dbapi_conn, connection_record):
    """Log when a new connection is created"""
    logger.debug("New database connection created")


@event.listens_for(engine.sync_engine, "invalidate")
def on_invalidate(dbapi_conn, connection_record, exception):
    """Log when a connection is invalidated"""
    logger.warning(
        f"Database connection invalidated: {exception}",
        exc_info=exception
    )
