"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A PostgreSQL connection pool shared by integration and adversarial tests
  (those tests are skipped when the database is unreachable)
- Table cleanup between database tests
- Factories for users and events stored in PostgreSQL
"""

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from campus_events.adapters.repository import PostgresEventRepository, PostgresUserRepository
from campus_events.adapters.repository.postgres import run_migrations
from campus_events.config.settings import get_settings
from campus_events.domain.models import Category, NewEvent, Role


@pytest.fixture(scope="session")
def database_pool() -> Generator[ConnectionPool, None, None]:
    """Open a pool against the configured database and apply migrations."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=3)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def pool(database_pool: ConnectionPool) -> Generator[ConnectionPool, None, None]:
    """Database pool with users and events truncated before each test."""
    with database_pool.connection() as conn:
        conn.execute("TRUNCATE events, users")
        conn.commit()
    yield database_pool


@pytest.fixture
def make_user(database_pool: ConnectionPool) -> Callable[..., UUID]:
    """Factory inserting a user row and returning its id."""
    users = PostgresUserRepository(database_pool)

    def factory(name: str = "Student", role: Role = Role.USER, email: str | None = None) -> UUID:
        return users.create_user(
            name=name,
            email=email or f"{uuid4().hex[:10]}@campus.edu",
            password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhas",
            preferences=[],
            role=role,
        )

    return factory


@pytest.fixture
def make_event(database_pool: ConnectionPool, make_user) -> Callable[..., UUID]:
    """Factory inserting an event row and returning its id."""
    events = PostgresEventRepository(database_pool)

    def factory(
        capacity: int | None = None,
        created_by: UUID | None = None,
        title: str = "Welcome Mixer",
        date: datetime | None = None,
    ) -> UUID:
        fields = NewEvent(
            title=title,
            description="Meet your classmates",
            date=date or datetime(2026, 9, 1, 18, 0, tzinfo=UTC),
            location="Student Union",
            category=Category.SOCIAL,
            capacity=capacity,
        )
        return events.create_event(fields, created_by=created_by or make_user("Organizer", Role.ADMIN))

    return factory
