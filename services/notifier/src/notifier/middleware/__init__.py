"""HTTP middleware for the UhaiLink notifier."""

from notifier.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
