"""
Tests for the notifier application factory, health endpoint and
request logging middleware.

The lifespan (database engine and gateway clients) is not entered: the
client is used without a ``with`` block and app state is set by hand.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog
from fastapi.testclient import TestClient

from uhai_common.config import Settings

from notifier.dispatcher import EmergencyDispatcher
from notifier.failover import SMSFailoverChain
from notifier.gateways import AfricasTalkingGateway, TwilioGateway, build_gateways
from notifier.main import build_dispatcher, create_app
from notifier_stubs import primary, secondary


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        africas_talking_api_key="at-key",
        africas_talking_sender_id="UHAILINK",
        twilio_account_sid="",
        log_json=False,
    )


@pytest.fixture()
def app(settings: Settings):
    yield create_app(settings)
    structlog.reset_defaults()


class TestBuildGateways:

    def test_order_and_configuration(self, settings: Settings) -> None:
        at, tw = build_gateways(settings)
        assert isinstance(at, AfricasTalkingGateway)
        assert isinstance(tw, TwilioGateway)
        assert at.is_configured is True
        assert at.sender_id == "UHAILINK"
        assert tw.is_configured is False

    def test_blank_username_disables_africas_talking(self) -> None:
        at, _ = build_gateways(Settings(africas_talking_api_key="k", africas_talking_username=""))
        assert at.is_configured is False

    def test_twilio_needs_all_three_credentials(self) -> None:
        _, tw = build_gateways(Settings(twilio_account_sid="AC1", twilio_auth_token="t"))
        assert tw.is_configured is False
        _, tw = build_gateways(
            Settings(twilio_account_sid="AC1", twilio_auth_token="t", twilio_phone_number="+1555"),
        )
        assert tw.is_configured is True

    def test_http_options_from_settings(self) -> None:
        s = Settings(sms_timeout_s=3.5, sms_max_attempts=4)
        for gw in build_gateways(s):
            assert gw.timeout == 3.5
            assert gw.max_attempts == 4


class TestBuildDispatcher:

    def test_wires_settings(self) -> None:
        s = Settings(app_name="UhaiLink Test", alert_timezone="UTC", per_recipient_audit=True)
        d = build_dispatcher(s, MagicMock())
        assert d.app_name == "UhaiLink Test"
        assert d.per_recipient_audit is True
        assert [gw.name for gw in d.chain.gateways] == ["africas_talking", "twilio"]


class TestHealth:

    def test_without_state(self, app) -> None:
        resp = TestClient(app).get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": None, "gateways": {}}

    def test_reports_gateways_and_database(self, app) -> None:
        app.state.dispatcher = EmergencyDispatcher(
            SMSFailoverChain([primary(), secondary(configured=False)]),
        )
        app.state.db_engine = MagicMock()
        with patch(
            "notifier.routers.health.check_database_health",
            AsyncMock(return_value=True),
        ):
            resp = TestClient(app).get("/health")

        assert resp.json() == {
            "status": "ok",
            "database": True,
            "gateways": {"africas_talking": True, "twilio": False},
        }

    def test_degraded_when_database_down(self, app) -> None:
        app.state.db_engine = MagicMock()
        with patch(
            "notifier.routers.health.check_database_health",
            AsyncMock(return_value=False),
        ):
            body = TestClient(app).get("/health").json()
        assert body["status"] == "degraded"
        assert body["database"] is False


class TestAppRoutes:

    def test_dispatch_route_mounted(self, app, trigger_body) -> None:
        app.state.dispatcher = EmergencyDispatcher(SMSFailoverChain([primary()]))
        resp = TestClient(app).post("/send-emergency-sms", json=trigger_body)
        assert resp.status_code == 200
        assert resp.json()["message"] == "Sent 2 SMS notifications, 0 failed"

    def test_dispatch_without_dispatcher_is_500(self, app, trigger_body) -> None:
        client = TestClient(app, raise_server_exceptions=False)
        assert client.post("/send-emergency-sms", json=trigger_body).status_code == 500

    def test_metrics_exposed(self, app) -> None:
        resp = TestClient(app).get("/metrics/")
        assert resp.status_code == 200
        assert "notifier_dispatch_requests_total" in resp.text


class TestLoggingMiddleware:

    def test_echoes_request_id(self, app) -> None:
        resp = TestClient(app).get("/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"

    def test_generates_request_id(self, app) -> None:
        resp = TestClient(app).get("/health")
        assert len(resp.headers["X-Request-ID"]) == 32
