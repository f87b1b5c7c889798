"""
Database connection and ORM utilities for UhaiLink.

This package provides async database connection management via SQLAlchemy
and the ORM mappings of the store tables the notifier reads and appends to.
"""

from uhai_common.db.connection import (
    build_engine,
    build_session_factory,
    check_database_health,
)
from uhai_common.db.orm_models import (
    Base,
    EmergencyIncidentORM,
    NotificationORM,
    ProfileORM,
)

__all__ = [
    "Base",
    "EmergencyIncidentORM",
    "NotificationORM",
    "ProfileORM",
    "build_engine",
    "build_session_factory",
    "check_database_health",
]
