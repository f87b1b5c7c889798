"""Shared fixtures for notifier service tests."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

# Use *append* so ``notifier_stubs`` is importable without shadowing anything.
sys.path.append(str(Path(__file__).resolve().parent))

# Keep tests independent of the developer's shell.
for _key in [k for k in os.environ if k.startswith("UHAI_")]:
    del os.environ[_key]

from uhai_common.models import Incident, Profile  # noqa: E402

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
USER_ID = "5d7d2d3c-6c1f-4b7e-9a55-1f0e9b4f2a10"
INCIDENT_ID = "0b6e3c52-8d2a-4f4e-bb1c-7d8f6a9e0c31"


# ─── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def trigger_body() -> dict[str, Any]:
    """A valid SOS request body with two reachable contacts."""
    return {
        "userId": USER_ID,
        "incidentId": INCIDENT_ID,
        "contacts": [
            {"id": "c1", "name": "Jane", "phone": "+254700111222", "relationship": "sister"},
            {"id": "c2", "name": "Otieno", "phone": "+254711333444"},
        ],
    }


@pytest.fixture()
def sample_profile() -> Profile:
    return Profile(full_name="Amina Wanjiku", blood_type="O+")


@pytest.fixture()
def sample_incident() -> Incident:
    return Incident(
        triggered_at=datetime(2026, 3, 14, 6, 5, tzinfo=timezone.utc),
        location_lat=-1.292066,
        location_lng=36.821946,
    )


@pytest.fixture()
def mock_store(sample_profile: Profile, sample_incident: Incident) -> AsyncMock:
    """Async mock standing in for a :class:`RecordStore`."""
    store = AsyncMock()
    store.get_profile = AsyncMock(return_value=sample_profile)
    store.get_incident = AsyncMock(return_value=sample_incident)
    return store


@pytest.fixture()
def record_writer() -> AsyncMock:
    """Async callable standing in for :class:`NotificationWriter`."""
    return AsyncMock(return_value=None)


@pytest.fixture()
def mock_db_session() -> AsyncMock:
    """Async mock for ``AsyncSession``."""
    session = AsyncMock()
    session.add = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.execute = AsyncMock()
    # ``async with factory() as session`` yields the session itself.
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.fixture()
def mock_db_session_factory(mock_db_session: AsyncMock) -> MagicMock:
    return MagicMock(return_value=mock_db_session)
