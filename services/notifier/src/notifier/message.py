"""
Alert text composition for the UhaiLink notifier.

Builds the single SMS body sent to every emergency contact.  The text is
the same whichever gateway ends up delivering it.

Format::

    ⚠️ EMERGENCY ALERT: <name> has triggered an emergency on <app>.

    📍 Location: Lat: <lat>, Lng: <lng>
    🩸 Blood Type: <blood type>
    ⏰ Time: <timestamp>

    Please contact them immediately.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from uhai_common.models import Incident, Profile

DEFAULT_NAME = "Someone"
DEFAULT_BLOOD_TYPE = "Unknown"
LOCATION_UNAVAILABLE = "Location unavailable"

_TIME_FORMAT = "%d %b %Y, %H:%M %Z"


def format_location(incident: Incident | None) -> str:
    """Render the incident coordinates with 4-decimal precision."""
    if incident is None or not incident.has_location:
        return LOCATION_UNAVAILABLE
    return f"Lat: {incident.location_lat:.4f}, Lng: {incident.location_lng:.4f}"


def format_timestamp(moment: datetime, tz: tzinfo) -> str:
    """Render *moment* in *tz*; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).strftime(_TIME_FORMAT)


def compose_alert_message(
    profile: Profile | None,
    incident: Incident | None,
    *,
    app_name: str = "UhaiLink",
    tz: tzinfo | str = "UTC",
    now: datetime | None = None,
) -> str:
    """Build the emergency SMS text from whatever context could be loaded.

    Args:
        profile: The user's profile, or ``None`` if the lookup failed.
        incident: The incident, or ``None`` if the lookup failed.
        app_name: Product name shown in the first line.
        tz: Display timezone (a ``tzinfo`` or an IANA zone name).
        now: Clock override used when the incident time is unknown.

    Returns:
        The complete message text.
    """
    if isinstance(tz, str):
        tz = ZoneInfo(tz)

    name = (profile.full_name if profile else None) or DEFAULT_NAME
    blood_type = (profile.blood_type if profile else None) or DEFAULT_BLOOD_TYPE

    moment = incident.triggered_at if incident and incident.triggered_at else None
    if moment is None:
        moment = now or datetime.now(timezone.utc)

    return (
        f"⚠️ EMERGENCY ALERT: {name} has triggered an emergency on {app_name}.\n\n"
        f"📍 Location: {format_location(incident)}\n"
        f"🩸 Blood Type: {blood_type}\n"
        f"⏰ Time: {format_timestamp(moment, tz)}\n\n"
        "Please contact them immediately."
    )
