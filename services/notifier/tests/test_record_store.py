"""Tests for notifier.store.RecordStore."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from uhai_common.models import Incident, Profile

from notifier.store import RecordStore


def _returns(session, row) -> None:
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    session.execute.return_value = result


class TestRecordStore:

    async def test_get_profile(self, mock_db_session, mock_db_session_factory) -> None:
        _returns(mock_db_session, SimpleNamespace(id="u1", full_name="Jane Doe", blood_type="A-"))

        profile = await RecordStore(mock_db_session_factory).get_profile("u1")

        assert profile == Profile(full_name="Jane Doe", blood_type="A-")
        mock_db_session_factory.assert_called_once_with()
        mock_db_session.__aexit__.assert_awaited_once()

    async def test_get_profile_missing(self, mock_db_session, mock_db_session_factory) -> None:
        _returns(mock_db_session, None)
        assert await RecordStore(mock_db_session_factory).get_profile("nobody") is None

    async def test_get_incident(self, mock_db_session, mock_db_session_factory) -> None:
        triggered = datetime(2026, 3, 14, 6, 5, tzinfo=timezone.utc)
        _returns(
            mock_db_session,
            SimpleNamespace(
                id="i1", user_id="u1", status="active",
                triggered_at=triggered, location_lat=-1.29, location_lng=36.82,
            ),
        )

        incident = await RecordStore(mock_db_session_factory).get_incident("i1")

        assert incident == Incident(triggered_at=triggered, location_lat=-1.29, location_lng=36.82)

    async def test_incident_query_uses_key(self, mock_db_session, mock_db_session_factory) -> None:
        _returns(mock_db_session, None)
        await RecordStore(mock_db_session_factory).get_incident("i1")

        stmt = mock_db_session.execute.await_args.args[0]
        assert "emergency_incidents" in str(stmt)
        assert list(stmt.compile().params.values()) == ["i1"]

    async def test_database_errors_propagate(self, mock_db_session, mock_db_session_factory) -> None:
        mock_db_session.execute.side_effect = RuntimeError("connection reset")
        with pytest.raises(RuntimeError):
            await RecordStore(mock_db_session_factory).get_profile("u1")
