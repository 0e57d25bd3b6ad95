"""Async SQLAlchemy engines for the read-side views.

Provides:
- create_engine(): a new AsyncEngine for an explicit URL
- get_engine(): lazily created AsyncEngine singleton on ``DATABASE_URL``
- close_db(): dispose of the singleton and its pool

Engines are long-lived and safe to share across concurrent view reads;
pooling is handled by SQLAlchemy.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.dealflow.config import get_settings

# ── Module-level engine (lazy init) ────────────────────────────────────────

_engine: AsyncEngine | None = None


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async engine with the configured pool settings.

    SQLite URLs skip the pool sizing arguments, which its pools reject.
    """
    settings = get_settings()
    kwargs: dict = {"echo": False}
    if not database_url.startswith("sqlite"):
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
        kwargs["pool_pre_ping"] = True
    return create_async_engine(database_url, **kwargs)


def get_engine() -> AsyncEngine:
    """Get or create the async engine singleton on ``DATABASE_URL``."""
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().DATABASE_URL)
    return _engine


async def close_db() -> None:
    """Dispose of the engine and close all connections."""
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None
