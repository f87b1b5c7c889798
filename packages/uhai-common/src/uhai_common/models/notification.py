"""
Notification audit data model for UhaiLink.

Defines the Pydantic model for the delivery audit trail: one record per
recipient per SOS dispatch, written once after delivery concludes and
never updated afterwards.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


class NotificationStatus(str, Enum):
    """Outcome recorded on an audit row."""

    SENT = "sent"
    FAILED = "failed"


class NotificationType(str, Enum):
    """Delivery medium of a notification."""

    SMS = "sms"


class SMSProvider(str, Enum):
    """SMS gateways the notifier can deliver through."""

    AFRICAS_TALKING = "africas_talking"
    TWILIO = "twilio"


class NotificationRecord(BaseModel):
    """One audit row proving a delivery attempt was made for a recipient.

    The ``notifications`` table is append-only from the notifier's point
    of view.

    Attributes:
        notification_id: Primary key (assigned by the database when ``None``).
        user_id: User who triggered the SOS.
        emergency_incident_id: Incident the alert belongs to.
        recipient_name: Contact name as supplied by the caller.
        recipient_phone: Phone number the alert was addressed to.
        message_text: Exact alert text submitted to the gateway.
        notification_type: Always ``sms`` for this service.
        status: ``sent`` or ``failed``.
        provider: Gateway that made the final delivery attempt.
        error_message: ``"; "``-joined gateway errors, or ``None``.
        external_id: Message id the provider issued for this recipient, if any.
        sent_at: When the record was produced (UTC).
    """

    model_config = {"from_attributes": True}

    notification_id: UUID | None = Field(
        default=None,
        description="Primary key (assigned by the database).",
    )
    user_id: str = Field(..., description="User who triggered the SOS.")
    emergency_incident_id: str = Field(..., description="Incident id.")
    recipient_name: str | None = Field(default=None)
    recipient_phone: str = Field(..., min_length=1)
    message_text: str = Field(...)
    notification_type: NotificationType = Field(default=NotificationType.SMS)
    status: NotificationStatus = Field(...)
    provider: SMSProvider = Field(...)
    error_message: str | None = Field(default=None)
    external_id: str | None = Field(default=None)
    sent_at: datetime = Field(default_factory=_utc_now)
