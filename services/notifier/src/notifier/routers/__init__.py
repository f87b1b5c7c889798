"""API routers for the UhaiLink notifier."""

from notifier.routers import dispatch, health, notifications

__all__ = ["dispatch", "health", "notifications"]
