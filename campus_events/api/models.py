"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON keys are camelCase and record ids are exposed as ``_id``.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from campus_events.domain.models import EventView, UserProfile, UserSummary


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


# Requests


class SignUpRequest(CamelModel):
    """Request model for account creation."""

    name: str = Field(..., description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")
    preferences: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(
        ..., min_length=6, description="New password (minimum 6 characters)"
    )


class EventRequest(CamelModel):
    """
    Request model for event creation and partial update.

    Field rules (non-blank text, category enum, positive capacity,
    parseable date) are enforced by the domain so that every failing
    field is reported together.
    """

    title: str | None = None
    description: str | None = None
    date: str | None = Field(default=None, description="ISO-8601 date-time")
    location: str | None = None
    category: str | None = Field(
        default=None, description="One of social, academic, sports, cultural, other"
    )
    # StrictInt so JSON true is not coerced to 1
    capacity: StrictInt | str | None = Field(
        default=None, description="Positive integer; omit for unlimited"
    )


class ProfileUpdateRequest(CamelModel):
    name: str
    email: EmailStr
    bio: str | None = None
    college: str | None = None
    major: str | None = None
    graduation_year: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class PreferencesRequest(CamelModel):
    preferences: list[str]


# Responses


class UserSummaryResponse(CamelModel):
    id: UUID = Field(..., alias="_id")
    name: str

    @classmethod
    def from_summary(cls, summary: UserSummary) -> "UserSummaryResponse":
        return cls(id=summary.id, name=summary.name)


class EventResponse(CamelModel):
    """Event with registrants and creator resolved to summaries."""

    id: UUID = Field(..., alias="_id")
    title: str
    description: str
    date: datetime
    location: str
    category: str
    capacity: int | None = None
    created_by: UserSummaryResponse | None = None
    registered_users: list[UserSummaryResponse]
    created_at: datetime | None = None

    @classmethod
    def from_view(cls, view: EventView) -> "EventResponse":
        event = view.event
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            date=event.date,
            location=event.location,
            category=event.category.value,
            capacity=event.capacity,
            created_by=(
                UserSummaryResponse.from_summary(view.created_by) if view.created_by else None
            ),
            registered_users=[UserSummaryResponse.from_summary(u) for u in view.registered_users],
            created_at=event.created_at,
        )


class UserResponse(CamelModel):
    """User record without the password hash. Absent profile text is ``""``."""

    id: UUID = Field(..., alias="_id")
    name: str
    email: str
    role: str
    is_admin: bool
    bio: str = ""
    college: str = ""
    major: str = ""
    graduation_year: str = ""
    preferences: list[str]
    registered_events: list[EventResponse]
    created_at: datetime | None = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserResponse":
        user = profile.user
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role.value,
            is_admin=user.is_admin,
            bio=user.bio or "",
            college=user.college or "",
            major=user.major or "",
            graduation_year=user.graduation_year or "",
            preferences=list(user.preferences),
            registered_events=[EventResponse.from_view(v) for v in profile.registered_events],
            created_at=user.created_at,
        )


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    msg: str


class FieldErrorResponse(BaseModel):
    param: str
    msg: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    msg: str
    errors: list[FieldErrorResponse] | None = None
