"""
Async access to the UhaiLink medical-ID store.

The notifier holds one engine for its lifetime.  Lookups and audit
writes each take a short-lived session from the factory built here, so
concurrent profile and incident reads never share a connection.
"""

from __future__ import annotations

import asyncio

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = structlog.get_logger(__name__)

_HEALTH_TIMEOUT_S = 2.0


def build_engine(dsn: str, pool_size: int = 5) -> AsyncEngine:
    """Create the async engine for *dsn*; connections are pinged on checkout."""
    return create_async_engine(dsn, pool_size=pool_size, pool_pre_ping=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions bound to *engine*; rows stay readable after commit."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def check_database_health(
    engine: AsyncEngine, timeout: float = _HEALTH_TIMEOUT_S,
) -> bool:
    """Run ``SELECT 1`` within *timeout* seconds; ``False`` on any failure."""

    async def _ping() -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    try:
        await asyncio.wait_for(_ping(), timeout)
    except Exception as exc:  # noqa: BLE001
        logger.warning("database_unreachable", error=str(exc) or type(exc).__name__)
        return False
    return True
