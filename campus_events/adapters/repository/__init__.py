"""Repository adapters - Database implementations."""

from .events import PostgresEventRepository
from .postgres import PostgresRegistrationRepository, open_pool, run_migrations
from .users import PostgresUserRepository

__all__ = [
    "PostgresEventRepository",
    "PostgresRegistrationRepository",
    "PostgresUserRepository",
    "open_pool",
    "run_migrations",
]
