"""
core/exceptions.py
──────────────────
Error taxonomy shared by every service module.

Services raise these; views catch ``PortalError`` and turn ``message`` into a
flash message (or an inline form error).  Nothing here knows about HTTP.
"""


class PortalError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(PortalError):
    """Bad or missing input.  No state was changed."""


class InvalidState(PortalError):
    """Transition attempted from a terminal or mismatched state."""


class NotFound(PortalError):
    """The referenced application / payment / course / user does not exist."""


class NotConfirmed(PortalError):
    """Destructive operation called without explicit confirmation."""


class DependencyConflict(PortalError):
    """Delete blocked by rows that still reference the target."""


class StorageFailure(PortalError):
    """An uploaded file could not be stored or removed."""
