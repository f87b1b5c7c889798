"""
SOS trigger data models for UhaiLink.

Defines the payload the web application sends when a user presses the
Emergency SOS button: the user, the already-persisted incident, and the
emergency contacts to alert.  Field aliases keep the camelCase wire
names used by the front-end.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Contact(BaseModel):
    """An emergency contact as supplied by the caller.

    The contact list is trusted as given; the notifier does not re-fetch
    it.  ``phone`` may be missing or blank, in which case the contact is
    skipped at delivery time.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str | None = None
    phone: str | None = None
    relationship: str | None = None

    @property
    def normalized_phone(self) -> str:
        """The phone number with surrounding whitespace removed (may be ``""``)."""
        return (self.phone or "").strip()

    @property
    def has_phone(self) -> bool:
        return bool(self.normalized_phone)


class EmergencyTrigger(BaseModel):
    """Request body of ``POST /send-emergency-sms``.

    Attributes:
        user_id: Id of the user who triggered the SOS (``userId``).
        incident_id: Id of the incident row created for this SOS
                     (``incidentId``).
        contacts: Non-empty list of contacts to notify.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="userId", min_length=1)
    incident_id: str = Field(..., alias="incidentId", min_length=1)
    contacts: list[Contact] = Field(..., min_length=1)

    def reachable_contacts(self) -> list[Contact]:
        """Contacts with a usable phone number, in request order."""
        return [c for c in self.contacts if c.has_phone]
