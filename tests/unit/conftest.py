"""
Shared fixtures for unit tests.

Provides an in-memory store implementing the registration, event and
user ports, so domain services can be exercised without PostgreSQL.
"""

import threading
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from campus_events.domain.models import (
    Category,
    Event,
    NewEvent,
    ProfileUpdate,
    RegistrationOutcome,
    Role,
    User,
    UserSummary,
)


class InMemoryStore:
    """
    Implements RegistrationRepository, EventRepository and UserRepository.

    A single lock makes each write atomic, mirroring the single
    transaction the PostgreSQL adapter uses.
    """

    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}
        self.events: dict[UUID, Event] = {}
        self._lock = threading.Lock()

    # Helpers for arranging test state

    def add_user(self, name: str = "Student", role: Role = Role.USER, email: str | None = None) -> User:
        user = User(
            id=uuid4(),
            name=name,
            email=email or f"{uuid4().hex[:8]}@campus.edu",
            password_hash="$2b$04$notarealhash",
            role=role,
            created_at=datetime.now(UTC),
        )
        self.users[user.id] = user
        return user

    def add_event(self, capacity: int | None = None, created_by: UUID | None = None, **fields: Any) -> Event:
        event = Event(
            id=uuid4(),
            title=fields.get("title", "Welcome Mixer"),
            description=fields.get("description", "Meet your classmates"),
            date=fields.get("date", datetime(2026, 9, 1, 18, 0, tzinfo=UTC)),
            location=fields.get("location", "Student Union"),
            category=fields.get("category", Category.SOCIAL),
            capacity=capacity,
            created_by=created_by,
            created_at=datetime.now(UTC),
        )
        self.events[event.id] = event
        return event

    # RegistrationRepository

    def add_registration(self, event_id: UUID, user_id: UUID) -> RegistrationOutcome:
        with self._lock:
            event = self.events.get(event_id)
            if event is None:
                return RegistrationOutcome.EVENT_NOT_FOUND
            user = self.users.get(user_id)
            if user is None:
                return RegistrationOutcome.USER_NOT_FOUND
            if event.is_full:
                return RegistrationOutcome.FULL
            if user_id in event.registered_users:
                return RegistrationOutcome.ALREADY_REGISTERED
            event.registered_users.append(user_id)
            if event_id not in user.registered_events:
                user.registered_events.append(event_id)
            return RegistrationOutcome.REGISTERED

    def remove_registration(self, event_id: UUID, user_id: UUID) -> RegistrationOutcome:
        with self._lock:
            event = self.events.get(event_id)
            if event is None:
                return RegistrationOutcome.EVENT_NOT_FOUND
            user = self.users.get(user_id)
            if user is None:
                return RegistrationOutcome.USER_NOT_FOUND
            if user_id not in event.registered_users:
                return RegistrationOutcome.NOT_REGISTERED
            event.registered_users = [u for u in event.registered_users if u != user_id]
            user.registered_events = [e for e in user.registered_events if e != event_id]
            return RegistrationOutcome.CANCELLED

    def repair_references(self, planner):
        with self._lock:
            plan = planner(
                {eid: list(e.registered_users) for eid, e in self.events.items()},
                {uid: list(u.registered_events) for uid, u in self.users.items()},
            )
            for event_id, registrants in plan.events.items():
                self.events[event_id].registered_users = list(registrants)
            for user_id, registered in plan.users.items():
                self.users[user_id].registered_events = list(registered)
            return plan

    # EventRepository

    def create_event(self, fields: NewEvent, created_by: UUID) -> UUID:
        event = self.add_event(
            capacity=fields.capacity,
            created_by=created_by,
            title=fields.title,
            description=fields.description,
            date=fields.date,
            location=fields.location,
            category=fields.category,
        )
        return event.id

    def get_event(self, event_id: UUID) -> Event | None:
        event = self.events.get(event_id)
        return replace(event, registered_users=list(event.registered_users)) if event else None

    def list_events(self) -> list[Event]:
        return sorted(self.events.values(), key=lambda e: e.date)

    def get_events(self, event_ids: list[UUID]) -> list[Event]:
        return [self.events[eid] for eid in dict.fromkeys(event_ids) if eid in self.events]

    def update_event(self, event_id: UUID, changes: dict[str, Any]) -> bool:
        with self._lock:
            event = self.events.get(event_id)
            if event is None:
                return False
            capacity = changes.get("capacity")
            if capacity is not None and len(event.registered_users) > capacity:
                return False
            for name, value in changes.items():
                setattr(event, name, value)
            return True

    def delete_event(self, event_id: UUID) -> bool:
        with self._lock:
            if self.events.pop(event_id, None) is None:
                return False
            for user in self.users.values():
                user.registered_events = [e for e in user.registered_events if e != event_id]
            return True

    # UserRepository

    def create_user(self, name, email, password_hash, preferences, role=Role.USER):
        with self._lock:
            if any(u.email == email for u in self.users.values()):
                return None
            user = User(
                id=uuid4(),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                preferences=list(preferences),
            )
            self.users[user.id] = user
            return user.id

    def get_user(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def list_users(self) -> list[User]:
        return list(self.users.values())

    def summarize_users(self, user_ids: list[UUID]) -> dict[UUID, UserSummary]:
        return {
            uid: UserSummary(id=uid, name=self.users[uid].name)
            for uid in user_ids
            if uid in self.users
        }

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> bool:
        user = self.users[user_id]
        user.name = update.name
        user.email = update.email
        user.bio = update.bio
        user.college = update.college
        user.major = update.major
        user.graduation_year = update.graduation_year
        return True

    def update_preferences(self, user_id: UUID, preferences: list[str]) -> None:
        self.users[user_id].preferences = list(preferences)

    def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        self.users[user_id].password_hash = password_hash

    def set_role(self, email: str, role: Role) -> User | None:
        user = self.get_user_by_email(email)
        if user is not None:
            user.role = role
        return user

    def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            if self.users.pop(user_id, None) is None:
                return False
            for event in self.events.values():
                event.registered_users = [u for u in event.registered_users if u != user_id]
            return True


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
