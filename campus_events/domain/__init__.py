"""
Domain layer - Pure business logic with zero framework imports.

This package contains the campus events rules: registration
consistency between users and events, the admin role gate, and
event/account services. It defines its own port interfaces for
infrastructure abstraction.
"""

from .accounts import AccountService
from .exceptions import (
    AlreadyRegistered,
    AuthenticationRequired,
    CampusEventsError,
    CapacityExceeded,
    Conflict,
    EmailInUse,
    EventNotFound,
    FieldError,
    Forbidden,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    NotRegistered,
    UserNotFound,
)
from .events import EventService
from .models import Category, Event, EventView, RegistrationOutcome, Role, User, UserProfile
from .ports import (
    EventRepository,
    PasswordHasher,
    RegistrationRepository,
    TokenService,
    UserRepository,
)
from .registration import RegistrationService

__all__ = [
    "AccountService",
    "AlreadyRegistered",
    "AuthenticationRequired",
    "CampusEventsError",
    "CapacityExceeded",
    "Category",
    "Conflict",
    "EmailInUse",
    "Event",
    "EventNotFound",
    "EventRepository",
    "EventService",
    "EventView",
    "FieldError",
    "Forbidden",
    "InvalidCredentials",
    "InvalidInput",
    "NotFound",
    "NotRegistered",
    "PasswordHasher",
    "RegistrationOutcome",
    "RegistrationRepository",
    "RegistrationService",
    "Role",
    "TokenService",
    "User",
    "UserNotFound",
    "UserProfile",
    "UserRepository",
]
