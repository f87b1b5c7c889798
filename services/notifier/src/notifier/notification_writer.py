"""
Notification audit writer for the UhaiLink notifier.

Persists one ``notifications`` row per recipient after a dispatch's
delivery attempts conclude.  Rows are inserted, never updated.
"""

from __future__ import annotations

from typing import Any, Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from uhai_common.db.orm_models import NotificationORM
from uhai_common.logging import mask_phone
from uhai_common.models import NotificationRecord

logger = structlog.get_logger(__name__)


class NotificationWriter:
    """Appends notification audit records to PostgreSQL.

    Parameters
    ----------
    session_factory:
        Callable returning an ``AsyncSession``.
    """

    def __init__(self, session_factory: Callable[..., Any]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def to_orm(record: NotificationRecord) -> NotificationORM:
        """Map a :class:`NotificationRecord` onto a new ORM row."""
        orm_obj = NotificationORM(
            user_id=record.user_id,
            emergency_incident_id=record.emergency_incident_id,
            recipient_name=record.recipient_name,
            recipient_phone=record.recipient_phone,
            message_text=record.message_text,
            notification_type=record.notification_type.value,
            status=record.status.value,
            provider=record.provider.value,
            error_message=record.error_message,
            external_id=record.external_id,
            sent_at=record.sent_at,
        )
        if record.notification_id is not None:
            orm_obj.id = record.notification_id
        return orm_obj

    async def write_record(
        self,
        record: NotificationRecord,
        *,
        db_session: AsyncSession | None = None,
    ) -> NotificationORM:
        """Persist a single audit record.

        If *db_session* is ``None`` the writer creates one via its factory.

        Raises:
            Exception: Whatever the database raised; the transaction is
                rolled back first.
        """
        orm_obj = self.to_orm(record)

        own_session = db_session is None
        session: AsyncSession = db_session or self._session_factory()
        try:
            session.add(orm_obj)
            await session.commit()
            logger.info(
                "notification_logged",
                incident_id=record.emergency_incident_id,
                recipient=mask_phone(record.recipient_phone),
                status=record.status.value,
                provider=record.provider.value,
            )
        except Exception:
            await session.rollback()
            logger.exception(
                "notification_log_failed",
                incident_id=record.emergency_incident_id,
                recipient=mask_phone(record.recipient_phone),
            )
            raise
        finally:
            if own_session:
                await session.close()

        return orm_obj

    async def __call__(self, record: NotificationRecord) -> NotificationORM:
        return await self.write_record(record)
