"""
PostgreSQL registration adapter - Implements RegistrationRepository protocol.

This module provides the PostgreSQL implementation of the domain's
registration port using psycopg3 with raw SQL, plus pool startup and
schema migrations.

Consistency Design:
------------------
Users and events store their cross-references as ordered UUID arrays
(``users.registered_events`` and ``events.registered_users``).

1. **Single transaction**: both sides of a registration are written in
   the same transaction, so the pair commits or rolls back together.

2. **Conditional UPDATE**: the capacity and duplicate guards live in the
   WHERE clause of the UPDATE that appends the registrant. Under READ
   COMMITTED a concurrent writer blocks on the row lock and re-evaluates
   the WHERE clause against the committed row, so two callers can never
   both take the last slot.

3. **Lock order**: every writer locks the user row before the event row
   (registration, cancellation, user deletion, event deletion), which
   keeps concurrent writers free of deadlocks.

4. **CHECK constraint**: ``events_within_capacity`` rejects any write that
   would leave more registrants than capacity.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path
from uuid import UUID

import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from campus_events.domain.models import RegistrationOutcome
from campus_events.domain.ports import ReferencePlanner
from campus_events.domain.repair import RepairPlan

logger = logging.getLogger(__name__)

# campus_events/adapters/repository/postgres.py -> <project root>/migrations
MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def _failed_guard(row: tuple | None) -> RegistrationOutcome | None:
    """Name the guard that rejected a registration, capacity first."""
    if row is None:
        return RegistrationOutcome.EVENT_NOT_FOUND
    capacity, count, already_registered = row
    if capacity is not None and count >= capacity:
        return RegistrationOutcome.FULL
    if already_registered:
        return RegistrationOutcome.ALREADY_REGISTERED
    return None


class PostgresRegistrationRepository:
    """
    Implements RegistrationRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def add_registration(self, event_id: UUID, user_id: UUID) -> RegistrationOutcome:
        """
        Atomically register a user for an event.

        Locks the user row, then appends to the event's registrants only if
        the event has room and the user is not already present. On success
        appends the event to the user's registered events (skipping it if
        already there) in the same transaction.

        Args:
            event_id: Event to register for
            user_id: Registering user

        Returns:
            REGISTERED, or the first failing guard
        """
        append_registrant_sql = """
            UPDATE events
            SET registered_users = array_append(registered_users, %(user_id)s)
            WHERE id = %(event_id)s
              AND NOT (%(user_id)s = ANY(registered_users))
              AND (capacity IS NULL OR cardinality(registered_users) < capacity)
            RETURNING id
        """

        append_event_sql = """
            UPDATE users
            SET registered_events = array_append(registered_events, %(event_id)s)
            WHERE id = %(user_id)s
              AND NOT (%(event_id)s = ANY(registered_events))
        """

        # Locks the event so a retried append cannot lose to another writer
        guard_sql = """
            SELECT capacity, cardinality(registered_users), %(user_id)s = ANY(registered_users)
            FROM events
            WHERE id = %(event_id)s
            FOR UPDATE
        """

        params = {"event_id": event_id, "user_id": user_id}

        with self._pool.connection() as conn, conn.cursor() as cursor:
            missing = self._lock_user(cursor, event_id, user_id)
            if missing is not None:
                conn.rollback()
                return missing

            cursor.execute(append_registrant_sql, params)
            if cursor.fetchone() is None:
                cursor.execute(guard_sql, params)
                failure = _failed_guard(cursor.fetchone())
                if failure is not None:
                    conn.rollback()
                    return failure
                # A slot opened after the conditional write; the row is now ours
                logger.debug("Event %s changed during registration, appending again", event_id)
                cursor.execute(append_registrant_sql, params)
                if cursor.fetchone() is None:
                    raise RuntimeError(f"Registration for event {event_id} did not apply")

            cursor.execute(append_event_sql, params)
            conn.commit()
            return RegistrationOutcome.REGISTERED

    def remove_registration(self, event_id: UUID, user_id: UUID) -> RegistrationOutcome:
        """
        Atomically remove a user from an event and the event from the user.

        array_remove keeps the order of the remaining elements.

        Returns:
            CANCELLED, EVENT_NOT_FOUND, USER_NOT_FOUND or NOT_REGISTERED
        """
        remove_registrant_sql = """
            UPDATE events
            SET registered_users = array_remove(registered_users, %(user_id)s)
            WHERE id = %(event_id)s AND %(user_id)s = ANY(registered_users)
            RETURNING id
        """

        remove_event_sql = """
            UPDATE users
            SET registered_events = array_remove(registered_events, %(event_id)s)
            WHERE id = %(user_id)s
        """

        params = {"event_id": event_id, "user_id": user_id}

        with self._pool.connection() as conn, conn.cursor() as cursor:
            missing = self._lock_user(cursor, event_id, user_id)
            if missing is not None:
                conn.rollback()
                return missing

            cursor.execute(remove_registrant_sql, params)
            if cursor.fetchone() is None:
                cursor.execute("SELECT 1 FROM events WHERE id = %s", (event_id,))
                exists = cursor.fetchone() is not None
                conn.rollback()
                return (
                    RegistrationOutcome.NOT_REGISTERED
                    if exists
                    else RegistrationOutcome.EVENT_NOT_FOUND
                )

            cursor.execute(remove_event_sql, params)
            conn.commit()
            return RegistrationOutcome.CANCELLED

    def repair_references(self, planner: ReferencePlanner) -> RepairPlan:
        """
        Recompute cross-references under table locks and write back corrections.

        EXCLUSIVE mode blocks registration writers (including their
        SELECT ... FOR UPDATE) but not plain reads.
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("LOCK TABLE users, events IN EXCLUSIVE MODE")

            cursor.execute("SELECT id, registered_users FROM events")
            event_registrants = {row[0]: list(row[1]) for row in cursor.fetchall()}
            cursor.execute("SELECT id, registered_events FROM users")
            user_events = {row[0]: list(row[1]) for row in cursor.fetchall()}

            plan = planner(event_registrants, user_events)

            for event_id, registrants in plan.events.items():
                cursor.execute(
                    "UPDATE events SET registered_users = %s::uuid[] WHERE id = %s",
                    (registrants, event_id),
                )
            for user_id, registered in plan.users.items():
                cursor.execute(
                    "UPDATE users SET registered_events = %s::uuid[] WHERE id = %s",
                    (registered, user_id),
                )
            conn.commit()
            return plan

    def _lock_user(self, cursor, event_id: UUID, user_id: UUID) -> RegistrationOutcome | None:
        """
        Lock the user row for the rest of the transaction.

        Returns:
            None when the user exists, otherwise EVENT_NOT_FOUND or
            USER_NOT_FOUND (a missing event is reported first)
        """
        cursor.execute("SELECT 1 FROM users WHERE id = %s FOR UPDATE", (user_id,))
        if cursor.fetchone() is not None:
            return None
        cursor.execute("SELECT 1 FROM events WHERE id = %s", (event_id,))
        if cursor.fetchone() is None:
            return RegistrationOutcome.EVENT_NOT_FOUND
        return RegistrationOutcome.USER_NOT_FOUND


def open_pool(
    conninfo: str,
    min_size: int,
    max_size: int,
    attempts: int = 5,
    backoff_seconds: float = 1.0,
    timeout_seconds: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
) -> ConnectionPool:
    """
    Open a connection pool, retrying with exponential backoff.

    A pool that fails to fill is closed and cannot be reopened, so each
    attempt builds a fresh pool.

    Args:
        conninfo: libpq connection string
        min_size: Minimum connections in pool
        max_size: Maximum connections in pool
        attempts: Number of attempts before giving up
        backoff_seconds: Delay before the second attempt, doubled after each failure
        timeout_seconds: How long each attempt waits for the pool to fill
        sleep: Delay function

    Raises:
        RuntimeError: If the database is unreachable after all attempts
    """
    delay = backoff_seconds
    for attempt in range(1, attempts + 1):
        logger.info("Connecting to database (attempt %d/%d)...", attempt, attempts)
        pool = ConnectionPool(
            conninfo=conninfo,
            min_size=min_size,
            max_size=max_size,
            open=False,
        )
        try:
            pool.open(wait=True, timeout=timeout_seconds)
            logger.info("Database connection pool ready")
            return pool
        except PoolTimeout as e:
            logger.warning("Database connection attempt %d failed: %s", attempt, e)
            pool.close()
            if attempt == attempts:
                raise RuntimeError(
                    f"Could not connect to database after {attempts} attempts"
                ) from e
            sleep(delay)
            delay *= 2

    raise RuntimeError("attempts must be at least 1")


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply every ``*.sql`` file in ``migrations_dir`` in filename order.

    Each file runs in its own transaction and must be idempotent
    (``IF NOT EXISTS``), since all files run on every startup.

    Raises:
        RuntimeError: If a migration fails; the failing file is rolled back
    """
    if not migrations_dir.is_dir():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))
    logger.info("Applying %d migration(s) from %s", len(sql_files), migrations_dir)

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except psycopg.Error as e:
            logger.error("Migration %s failed: %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info("Migration applied: %s", sql_file.name)
