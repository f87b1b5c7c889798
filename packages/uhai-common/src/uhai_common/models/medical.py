"""
Medical-context data models for UhaiLink.

Defines the read-only projections of the ``profiles`` and
``emergency_incidents`` tables that the notifier embeds in alert text.
Only the columns the alert needs are modelled; the rest of each row
belongs to the web application.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Profile(BaseModel):
    """The subset of a user's medical profile used in an SOS alert.

    Attributes:
        full_name: Display name of the person in distress.
        blood_type: Blood group as entered by the user (e.g. ``"O+"``).
    """

    model_config = {"from_attributes": True}

    full_name: str | None = Field(default=None, description="User's full name.")
    blood_type: str | None = Field(default=None, description="User's blood type.")


class Incident(BaseModel):
    """The subset of an emergency incident used in an SOS alert.

    Incidents are created by the SOS trigger before the notifier runs;
    the notifier never creates or updates them.

    Attributes:
        triggered_at: When the user pressed the SOS button.
        location_lat: Latitude reported by the device, if any.
        location_lng: Longitude reported by the device, if any.
    """

    model_config = {"from_attributes": True}

    triggered_at: datetime | None = Field(default=None, description="Trigger timestamp.")
    location_lat: float | None = Field(default=None, description="Latitude.")
    location_lng: float | None = Field(default=None, description="Longitude.")

    @property
    def has_location(self) -> bool:
        """``True`` when both coordinates were captured."""
        return self.location_lat is not None and self.location_lng is not None
