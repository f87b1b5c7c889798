"""
Medical-context lookups for the UhaiLink notifier.

Reads the profile and incident rows that the alert text is built from.
Each lookup opens its own session so the two can run concurrently.
"""

from __future__ import annotations

from typing import Any, Callable

import structlog
from sqlalchemy import select

from uhai_common.db.orm_models import EmergencyIncidentORM, ProfileORM
from uhai_common.models import Incident, Profile

logger = structlog.get_logger(__name__)


class RecordStore:
    """Key lookups against the ``profiles`` and ``emergency_incidents`` tables.

    Parameters
    ----------
    session_factory:
        Callable returning an ``AsyncSession`` usable as an async context
        manager (an ``async_sessionmaker``).
    """

    def __init__(self, session_factory: Callable[..., Any]) -> None:
        self._session_factory = session_factory

    async def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile for *user_id*, or ``None`` if there is none.

        Database errors propagate to the caller.
        """
        stmt = select(ProfileORM).where(ProfileORM.id == user_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        if row is None:
            logger.debug("profile_not_found", user_id=user_id)
            return None
        return Profile.model_validate(row)

    async def get_incident(self, incident_id: str) -> Incident | None:
        """Return the incident for *incident_id*, or ``None`` if there is none.

        Database errors propagate to the caller.
        """
        stmt = select(EmergencyIncidentORM).where(EmergencyIncidentORM.id == incident_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        if row is None:
            logger.debug("incident_not_found", incident_id=incident_id)
            return None
        return Incident.model_validate(row)
