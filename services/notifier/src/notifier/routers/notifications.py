"""
Notification audit API router for the UhaiLink notifier.

Read-only listing of the delivery audit trail, filtered by incident,
user and status, newest first.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from uhai_common.db.orm_models import NotificationORM
from uhai_common.models import NotificationStatus

from notifier.dependencies import get_db_session
from notifier.schemas import NotificationListResponse, NotificationSummary

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    incident_id: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    status: Optional[NotificationStatus] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> NotificationListResponse:
    stmt = select(NotificationORM)
    if incident_id:
        stmt = stmt.where(NotificationORM.emergency_incident_id == incident_id)
    if user_id:
        stmt = stmt.where(NotificationORM.user_id == user_id)
    if status:
        stmt = stmt.where(NotificationORM.status == status.value)

    stmt = stmt.order_by(NotificationORM.created_at.desc()).offset(offset).limit(limit)

    result = await db.execute(stmt)
    rows = result.scalars().all()

    notifications = [
        NotificationSummary(
            id=r.id,
            user_id=str(r.user_id),
            emergency_incident_id=str(r.emergency_incident_id) if r.emergency_incident_id else None,
            recipient_name=r.recipient_name,
            recipient_phone=r.recipient_phone,
            notification_type=r.notification_type,
            status=r.status,
            provider=r.provider,
            error_message=r.error_message,
            external_id=r.external_id,
            sent_at=r.sent_at,
            created_at=r.created_at,
        )
        for r in rows
    ]
    return NotificationListResponse(notifications=notifications, total=len(notifications))
