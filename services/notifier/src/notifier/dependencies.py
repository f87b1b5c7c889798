"""
FastAPI dependency injection providers for the UhaiLink notifier.

Defines reusable Depends() callables for the dispatcher and database
sessions, both created once during application startup and stored on
``app.state``.
"""

from __future__ import annotations

from typing import Any, AsyncIterator

from fastapi import Request

from notifier.dispatcher import EmergencyDispatcher


async def get_dispatcher(request: Request) -> EmergencyDispatcher:
    """Return the dispatcher built at startup."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("Dispatcher is not initialised")
    return dispatcher


async def get_db_session(request: Request) -> AsyncIterator[Any]:
    """Yield an ``AsyncSession`` from the app-level session factory.

    The factory is stored on ``request.app.state.db_session_factory``
    during startup.
    """
    factory = getattr(request.app.state, "db_session_factory", None)
    if factory is None:
        raise RuntimeError("Database session factory is not initialised")
    session = factory()
    try:
        yield session
    finally:
        await session.close()
