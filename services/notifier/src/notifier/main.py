"""
Notifier service entry point for UhaiLink.

Reads settings once, builds the SMS gateways, failover chain, record
store, audit writer and dispatcher at startup, and exposes the SOS
endpoint, the audit listing, health and metrics.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from uhai_common.config import Settings, get_settings
from uhai_common.db.connection import build_engine, build_session_factory
from uhai_common.logging import configure_logging

from notifier.dispatcher import EmergencyDispatcher
from notifier.failover import SMSFailoverChain
from notifier.gateways import build_gateways
from notifier.middleware import LoggingMiddleware
from notifier.notification_writer import NotificationWriter
from notifier.routers import dispatch, health, notifications
from notifier.store import RecordStore

logger = structlog.get_logger(__name__)


def build_dispatcher(
    settings: Settings, session_factory: Callable[..., Any],
) -> EmergencyDispatcher:
    """Wire the dispatcher from *settings* and a session factory."""
    chain = SMSFailoverChain(build_gateways(settings))
    return EmergencyDispatcher(
        chain,
        store=RecordStore(session_factory),
        record_writer=NotificationWriter(session_factory),
        app_name=settings.app_name,
        alert_timezone=settings.alert_timezone,
        per_recipient_audit=settings.per_recipient_audit,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle for the notifier service."""
    settings: Settings = app.state.settings
    engine = build_engine(settings.db_uri, settings.db_pool_size)
    session_factory = build_session_factory(engine)
    dispatcher = build_dispatcher(settings, session_factory)

    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    app.state.dispatcher = dispatcher
    logger.info(
        "notifier_service_starting",
        gateways={gw.name: gw.is_configured for gw in dispatcher.chain.gateways},
    )
    try:
        yield
    finally:
        logger.info("notifier_service_stopping")
        await dispatcher.chain.close()
        await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(title="UhaiLink Emergency Notifier", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(dispatch.router)
    app.include_router(notifications.router)
    app.include_router(health.router)
    app.mount("/metrics", make_asgi_app())

    app.add_middleware(LoggingMiddleware)
    return app


def run() -> None:
    """Run the notifier under uvicorn using the configured bind address."""
    settings = get_settings()
    uvicorn.run(
        "notifier.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


if __name__ == "__main__":
    run()
