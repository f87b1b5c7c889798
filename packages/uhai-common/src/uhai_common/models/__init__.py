"""
Shared Pydantic data models for UhaiLink.

This package contains the cross-service data models: SOS trigger
payloads, the medical context read from the store, and the
notification audit record.
"""

from uhai_common.models.medical import Incident, Profile
from uhai_common.models.notification import (
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    SMSProvider,
)
from uhai_common.models.trigger import Contact, EmergencyTrigger

__all__ = [
    "Contact",
    "EmergencyTrigger",
    "Incident",
    "NotificationRecord",
    "NotificationStatus",
    "NotificationType",
    "Profile",
    "SMSProvider",
]
