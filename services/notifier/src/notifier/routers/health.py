"""
Health check endpoint for the UhaiLink notifier.

Reports liveness, database reachability, and which SMS gateways hold a
full credential set.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from uhai_common.db.connection import check_database_health

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    """Return ``{"status": "ok", ...}`` when the service is alive.

    ``status`` is ``"degraded"`` when the database does not answer; SOS
    delivery still works then, only the context and audit trail suffer.
    """
    state = request.app.state
    dispatcher = getattr(state, "dispatcher", None)
    engine = getattr(state, "db_engine", None)

    gateways = {}
    if dispatcher is not None:
        gateways = {gw.name: gw.is_configured for gw in dispatcher.chain.gateways}
    database = await check_database_health(engine) if engine is not None else None

    return {
        "status": "degraded" if database is False else "ok",
        "database": database,
        "gateways": gateways,
    }
