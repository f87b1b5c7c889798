"""
SQLAlchemy ORM models for UhaiLink.

Maps the tables of the medical-ID store that the notifier touches:
``profiles`` and ``emergency_incidents`` (read-only) and
``notifications`` (append-only).  The web application owns the schema;
only the columns the notifier reads or writes are mapped here, using
SQLAlchemy 2.0 declarative style with ``mapped_column``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Return timezone-aware UTC now for server defaults."""
    return datetime.now(timezone.utc)


# ── Base class ──


class Base(DeclarativeBase):
    """Declarative base for all UhaiLink ORM models."""


# ── ORM models ──


class ProfileORM(Base):
    """ORM model for the ``profiles`` table (read-only here)."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(PG_UUID(as_uuid=False), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    blood_type: Mapped[str | None] = mapped_column(String(10), nullable=True)


class EmergencyIncidentORM(Base):
    """ORM model for the ``emergency_incidents`` table (read-only here)."""

    __tablename__ = "emergency_incidents"

    id: Mapped[str] = mapped_column(PG_UUID(as_uuid=False), primary_key=True)
    triggered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)


class NotificationORM(Base):
    """ORM model for the ``notifications`` table.

    Rows are inserted once per recipient per dispatch and never updated
    by the notifier.
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(
        PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(PG_UUID(as_uuid=False), nullable=False, index=True)
    emergency_incident_id: Mapped[str | None] = mapped_column(
        PG_UUID(as_uuid=False), nullable=True, index=True,
    )
    recipient_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    recipient_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    message_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    notification_type: Mapped[str] = mapped_column(String(20), nullable=False, default="sms")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    provider: Mapped[str | None] = mapped_column(String(50), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Provider message id (Africa's Talking messageId, Twilio sid).
    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
