"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

from .models import Event, NewEvent, ProfileUpdate, RegistrationOutcome, Role, User, UserSummary

if TYPE_CHECKING:
    from .repair import RepairPlan

ReferencePlanner = Callable[
    [dict[UUID, list[UUID]], dict[UUID, list[UUID]]],
    "RepairPlan",
]


class RegistrationRepository(Protocol):
    """Port interface for the user/event cross-reference writes."""

    def add_registration(self, event_id: UUID, user_id: UUID) -> RegistrationOutcome:
        """
        Atomically register a user for an event.

        The capacity check, duplicate check and append to the event's
        registrants must be evaluated as a single conditional write,
        and the back-reference on the user must be written in the same
        transaction.

        Guards are reported in this order:
        1. EVENT_NOT_FOUND: no event with that id
        2. USER_NOT_FOUND: no user with that id
        3. FULL: capacity set and registrant count >= capacity
        4. ALREADY_REGISTERED: user already among the registrants

        Returns:
            REGISTERED on success, otherwise the first failing guard
        """
        ...

    def remove_registration(self, event_id: UUID, user_id: UUID) -> RegistrationOutcome:
        """
        Atomically remove a user from an event and the event from the user.

        Returns:
            CANCELLED on success, EVENT_NOT_FOUND, USER_NOT_FOUND,
            or NOT_REGISTERED when the user is not among the registrants
        """
        ...

    def repair_references(self, planner: "ReferencePlanner") -> "RepairPlan":
        """
        Recompute and overwrite cross-references in one locked transaction.

        Both tables are locked against concurrent registration writes,
        both sides of every reference are read and handed to ``planner``
        as (event id -> registrant ids, user id -> registered event ids),
        and the lists in the returned plan are written back.

        Returns:
            The plan that was applied
        """
        ...


class EventRepository(Protocol):
    """Port interface for event persistence."""

    def create_event(self, fields: NewEvent, created_by: UUID) -> UUID: ...

    def get_event(self, event_id: UUID) -> Event | None: ...

    def list_events(self) -> list[Event]:
        """All events ordered by date, earliest first."""
        ...

    def get_events(self, event_ids: list[UUID]) -> list[Event]:
        """Events for the given ids, in the given order, skipping missing ids."""
        ...

    def update_event(self, event_id: UUID, changes: dict[str, Any]) -> bool:
        """
        Apply a partial update.

        When ``capacity`` is among the changes, the write only succeeds if
        the current registrant count fits the new capacity.

        Returns:
            True if a row was updated, False otherwise
        """
        ...

    def delete_event(self, event_id: UUID) -> bool:
        """Delete the event and strip its id from every user's registered events."""
        ...


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        preferences: list[str],
        role: Role = Role.USER,
    ) -> UUID | None:
        """
        Atomically insert a user unless the email is taken.

        Returns:
            The new user id, or None if the email already exists
        """
        ...

    def get_user(self, user_id: UUID) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def list_users(self) -> list[User]: ...

    def summarize_users(self, user_ids: list[UUID]) -> dict[UUID, UserSummary]:
        """Id and name for each existing user among ``user_ids``."""
        ...

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> bool:
        """
        Replace profile fields.

        Returns:
            False if the email collided with another user's, True otherwise
        """
        ...

    def update_preferences(self, user_id: UUID, preferences: list[str]) -> None: ...

    def update_password_hash(self, user_id: UUID, password_hash: str) -> None: ...

    def set_role(self, email: str, role: Role) -> User | None: ...

    def delete_user(self, user_id: UUID) -> bool:
        """Delete the user and strip their id from every event's registrants."""
        ...


class PasswordHasher(Protocol):
    """Port interface for password hashing."""

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Constant-time check; a None hash still costs one bcrypt comparison."""
        ...


class TokenService(Protocol):
    """Port interface for bearer token issuance and verification."""

    def issue(self, user_id: UUID) -> str: ...

    def resolve(self, token: str) -> UUID:
        """
        Verify a token and return its subject.

        Raises:
            AuthenticationRequired: If the token is invalid or expired
        """
        ...
