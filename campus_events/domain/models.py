"""
Domain records - Explicit types for users, events and their projections.

Optional profile text is modeled as None rather than an empty string;
the API layer adapts absent values to the wire format.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class Role(str, Enum):
    """Closed set of account roles."""

    USER = "user"
    ADMIN = "admin"


class Category(str, Enum):
    """Closed set of event categories."""

    SOCIAL = "social"
    ACADEMIC = "academic"
    SPORTS = "sports"
    CULTURAL = "cultural"
    OTHER = "other"


class RegistrationOutcome(Enum):
    """
    Result of an atomic registration write.

    The repository reports which guard stopped the write so the
    domain can raise the matching exception.
    """

    REGISTERED = "registered"
    CANCELLED = "cancelled"
    EVENT_NOT_FOUND = "event_not_found"
    USER_NOT_FOUND = "user_not_found"
    FULL = "full"
    ALREADY_REGISTERED = "already_registered"
    NOT_REGISTERED = "not_registered"


@dataclass
class User:
    id: UUID
    name: str
    email: str
    password_hash: str
    role: Role = Role.USER
    bio: str | None = None
    college: str | None = None
    major: str | None = None
    graduation_year: str | None = None
    preferences: list[str] = field(default_factory=list)
    registered_events: list[UUID] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass
class Event:
    id: UUID
    title: str
    description: str
    date: datetime
    location: str
    category: Category
    capacity: int | None = None
    created_by: UUID | None = None
    registered_users: list[UUID] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and len(self.registered_users) >= self.capacity


@dataclass(frozen=True)
class UserSummary:
    """Minimal user projection used for registrants and creators."""

    id: UUID
    name: str


@dataclass
class EventView:
    """Event with its references resolved to user summaries."""

    event: Event
    registered_users: list[UserSummary]
    created_by: UserSummary | None


@dataclass
class UserProfile:
    """User with registered events resolved. Never carries the password hash."""

    user: User
    registered_events: list[EventView]


@dataclass
class NewEvent:
    """Validated fields for an event about to be persisted."""

    title: str
    description: str
    date: datetime
    location: str
    category: Category
    capacity: int | None = None


@dataclass
class ProfileUpdate:
    name: str
    email: str
    bio: str | None = None
    college: str | None = None
    major: str | None = None
    graduation_year: str | None = None
