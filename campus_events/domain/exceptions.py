"""
Domain exceptions - Semantic error types for campus events.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each exception carries the user-facing message the API returns.
"""

from dataclasses import dataclass


class CampusEventsError(Exception):
    """Base class for campus events domain errors."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


@dataclass(frozen=True)
class FieldError:
    """A single failed field check."""

    param: str
    msg: str


class InvalidInput(CampusEventsError):
    """One or more submitted fields failed validation."""

    default_message = "Invalid input"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors


class AuthenticationRequired(CampusEventsError):
    """Bearer token missing, malformed, or expired."""

    default_message = "Token is not valid"


class Forbidden(CampusEventsError):
    """Actor lacks the admin role."""

    default_message = "Access denied. Admin privileges required."


class NotFound(CampusEventsError):
    """Referenced record does not exist."""

    pass


class EventNotFound(NotFound):
    default_message = "Event not found"


class UserNotFound(NotFound):
    default_message = "User not found"


class Conflict(CampusEventsError):
    """Request conflicts with current state of a record."""

    pass


class AlreadyRegistered(Conflict):
    default_message = "Already registered for this event"


class NotRegistered(Conflict):
    default_message = "Not registered for this event"


class EmailInUse(Conflict):
    default_message = "Email already in use"


class InvalidCredentials(Conflict):
    default_message = "Invalid credentials"


class CapacityExceeded(CampusEventsError):
    """Event has no remaining slots."""

    default_message = "Event is full"
