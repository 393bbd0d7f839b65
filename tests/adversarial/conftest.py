"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for concurrent registration attacks.
"""

import pytest
from psycopg_pool import ConnectionPool

from campus_events.adapters.repository import (
    PostgresEventRepository,
    PostgresRegistrationRepository,
    PostgresUserRepository,
)
from campus_events.domain.registration import RegistrationService


@pytest.fixture
def service(pool: ConnectionPool) -> RegistrationService:
    """Registration service wired to PostgreSQL."""
    return RegistrationService(
        registrations=PostgresRegistrationRepository(pool),
        events=PostgresEventRepository(pool),
        users=PostgresUserRepository(pool),
    )
