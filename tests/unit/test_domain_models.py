"""
Unit tests for domain models, exceptions and the admin gate.

Tests verify:
- Role and Category are closed string enums
- Exceptions carry their user-facing messages
- ensure_admin() gate
- Domain purity (zero framework imports)
"""

import subprocess
from enum import Enum
from pathlib import Path
from uuid import uuid4

import pytest

from campus_events.domain.access import ensure_admin
from campus_events.domain.exceptions import (
    AlreadyRegistered,
    AuthenticationRequired,
    CampusEventsError,
    CapacityExceeded,
    Conflict,
    EmailInUse,
    EventNotFound,
    FieldError,
    Forbidden,
    InvalidInput,
    NotFound,
    UserNotFound,
)
from campus_events.domain.models import Category, Event, Role, User

DOMAIN_DIR = Path(__file__).resolve().parents[2] / "campus_events" / "domain"


class TestEnums:
    def test_role_is_str_enum(self) -> None:
        assert issubclass(Role, str)
        assert issubclass(Role, Enum)
        assert {r.value for r in Role} == {"user", "admin"}

    def test_category_values(self) -> None:
        assert {c.value for c in Category} == {"social", "academic", "sports", "cultural", "other"}

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ValueError):
            Category("party")


class TestRecords:
    def test_user_defaults(self) -> None:
        user = User(id=uuid4(), name="Ada", email="ada@campus.edu", password_hash="x")
        assert user.role is Role.USER
        assert not user.is_admin
        assert user.bio is None
        assert user.registered_events == []

    @pytest.mark.parametrize(
        ("capacity", "registrants", "full"),
        [(None, 100, False), (3, 2, False), (3, 3, True), (1, 1, True)],
    )
    def test_event_is_full(self, capacity, registrants, full) -> None:
        event = Event(
            id=uuid4(),
            title="t",
            description="d",
            date=None,
            location="l",
            category=Category.OTHER,
            capacity=capacity,
            registered_users=[uuid4() for _ in range(registrants)],
        )
        assert event.is_full is full


class TestExceptions:
    def test_all_inherit_base(self) -> None:
        for error in (
            InvalidInput([]),
            AuthenticationRequired(),
            Forbidden(),
            EventNotFound(),
            UserNotFound(),
            AlreadyRegistered(),
            EmailInUse(),
            CapacityExceeded(),
        ):
            assert isinstance(error, CampusEventsError)

    def test_not_found_hierarchy(self) -> None:
        assert issubclass(EventNotFound, NotFound)
        assert issubclass(UserNotFound, NotFound)

    def test_conflict_hierarchy(self) -> None:
        assert issubclass(AlreadyRegistered, Conflict)
        assert issubclass(EmailInUse, Conflict)

    def test_default_messages(self) -> None:
        assert CapacityExceeded().message == "Event is full"
        assert Forbidden().message == "Access denied. Admin privileges required."
        assert str(EventNotFound()) == "Event not found"

    def test_message_override(self) -> None:
        assert EmailInUse("User already exists").message == "User already exists"

    def test_invalid_input_carries_field_errors(self) -> None:
        error = InvalidInput([FieldError("title", "Title is required")], "Invalid event data")
        assert error.message == "Invalid event data"
        assert error.errors[0].param == "title"


class TestEnsureAdmin:
    def test_admin_passes(self) -> None:
        ensure_admin(User(id=uuid4(), name="a", email="a@x.io", password_hash="x", role=Role.ADMIN))

    def test_user_forbidden(self) -> None:
        with pytest.raises(Forbidden):
            ensure_admin(User(id=uuid4(), name="u", email="u@x.io", password_hash="x"))


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
            "import jwt",
            "import bcrypt",
        ],
    )
    def test_no_framework_imports_in_domain(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, str(DOMAIN_DIR)],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"
