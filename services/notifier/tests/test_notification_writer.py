"""
Tests for notifier.notification_writer.NotificationWriter.

Verifies that audit records are mapped onto ORM rows, committed, and
rolled back on failure.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from uhai_common.db.orm_models import NotificationORM
from uhai_common.models import NotificationRecord, NotificationStatus, SMSProvider

from notifier.notification_writer import NotificationWriter

SENT_AT = datetime(2026, 3, 14, 6, 6, tzinfo=timezone.utc)


def _make_record(**overrides) -> NotificationRecord:
    defaults = dict(
        user_id="u1",
        emergency_incident_id="i1",
        recipient_name="Jane",
        recipient_phone="+254700111222",
        message_text="⚠️ EMERGENCY ALERT",
        status=NotificationStatus.FAILED,
        provider=SMSProvider.TWILIO,
        error_message="Twilio not configured",
        external_id="SM0001",
        sent_at=SENT_AT,
    )
    defaults.update(overrides)
    return NotificationRecord(**defaults)


class TestToOrm:

    def test_maps_every_field(self) -> None:
        orm = NotificationWriter.to_orm(_make_record())
        assert isinstance(orm, NotificationORM)
        assert orm.user_id == "u1"
        assert orm.emergency_incident_id == "i1"
        assert orm.recipient_name == "Jane"
        assert orm.recipient_phone == "+254700111222"
        assert orm.message_text == "⚠️ EMERGENCY ALERT"
        assert orm.notification_type == "sms"
        assert orm.status == "failed"
        assert orm.provider == "twilio"
        assert orm.error_message == "Twilio not configured"
        assert orm.external_id == "SM0001"
        assert orm.sent_at == SENT_AT

    def test_explicit_id_kept(self) -> None:
        nid = uuid.uuid4()
        assert NotificationWriter.to_orm(_make_record(notification_id=nid)).id == nid


class TestWriteRecord:

    async def test_commits_with_own_session(self, mock_db_session, mock_db_session_factory) -> None:
        writer = NotificationWriter(mock_db_session_factory)

        orm = await writer.write_record(_make_record())

        mock_db_session.add.assert_called_once_with(orm)
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.close.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    async def test_caller_session_left_open(self, mock_db_session, mock_db_session_factory) -> None:
        writer = NotificationWriter(mock_db_session_factory)

        await writer.write_record(_make_record(), db_session=mock_db_session)

        mock_db_session_factory.assert_not_called()
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.close.assert_not_awaited()

    async def test_rolls_back_and_reraises(self, mock_db_session, mock_db_session_factory) -> None:
        mock_db_session.commit.side_effect = RuntimeError("unique violation")
        writer = NotificationWriter(mock_db_session_factory)

        with pytest.raises(RuntimeError, match="unique violation"):
            await writer.write_record(_make_record())

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.close.assert_awaited_once()

    async def test_callable_form(self, mock_db_session, mock_db_session_factory) -> None:
        writer = NotificationWriter(mock_db_session_factory)
        await writer(_make_record(status=NotificationStatus.SENT))
        added = mock_db_session.add.call_args.args[0]
        assert added.status == "sent"
