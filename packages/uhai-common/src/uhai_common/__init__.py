"""
uhai-common: Shared library for UhaiLink.

Provides common data models, configuration management, database
connections and structured logging used by the UhaiLink backend
services.
"""

from uhai_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
