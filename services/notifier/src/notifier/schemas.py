"""
API schemas for the UhaiLink notifier.

Pydantic response models for the SOS dispatch endpoint and the
read-only notification audit listing.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class DeliveryDetails(BaseModel):
    success: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    errors: list[str] = Field(default_factory=list)


class DispatchResponse(BaseModel):
    success: bool = True
    message: str
    details: DeliveryDetails


class ErrorResponse(BaseModel):
    error: str


class NotificationSummary(BaseModel):
    id: UUID
    user_id: str
    emergency_incident_id: str | None = None
    recipient_name: str | None = None
    recipient_phone: str | None = None
    notification_type: str
    status: str
    provider: str | None = None
    error_message: str | None = None
    external_id: str | None = None
    sent_at: datetime | None = None
    created_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationSummary]
    total: int
