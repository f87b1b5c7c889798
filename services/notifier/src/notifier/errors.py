"""Exception types raised by the UhaiLink notifier."""

from __future__ import annotations


class NotifierError(Exception):
    """Base class for notifier errors."""


class BadRequestError(NotifierError):
    """The SOS request cannot be dispatched as given.

    Raised before any gateway call or audit write, so a rejected request
    leaves no trace in the store.
    """
