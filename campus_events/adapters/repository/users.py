"""
PostgreSQL user adapter - Implements UserRepository protocol.

The password hash is read into the domain User record but never
leaves the domain; API response models have no field for it.
"""

import logging
from typing import Any
from uuid import UUID

from psycopg import errors
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from campus_events.domain.models import ProfileUpdate, Role, User, UserSummary

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    id, name, email, password_hash, role, bio, college, major,
    graduation_year, preferences, registered_events, created_at
"""


def _to_user(row: dict[str, Any]) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        bio=row["bio"],
        college=row["college"],
        major=row["major"],
        graduation_year=row["graduation_year"],
        preferences=list(row["preferences"]),
        registered_events=list(row["registered_events"]),
        created_at=row["created_at"],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        preferences: list[str],
        role: Role = Role.USER,
    ) -> UUID | None:
        """
        Atomically insert a user.

        The UNIQUE constraint on email decides concurrent sign-ups;
        ON CONFLICT DO NOTHING turns the loser into a None result.
        """
        insert_sql = """
            INSERT INTO users (name, email, password_hash, role, preferences)
            VALUES (%s, %s, %s, %s, %s::text[])
            ON CONFLICT (email) DO NOTHING
            RETURNING id
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(insert_sql, (name, email, password_hash, role.value, preferences))
            row = cursor.fetchone()
            conn.commit()
            return row[0] if row is not None else None

    def get_user(self, user_id: UUID) -> User | None:
        return self._fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s", user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self._fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s", email)

    def list_users(self) -> list[User]:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at ASC")
            rows = cursor.fetchall()
        return [_to_user(row) for row in rows]

    def summarize_users(self, user_ids: list[UUID]) -> dict[UUID, UserSummary]:
        if not user_ids:
            return {}
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT id, name FROM users WHERE id = ANY(%s)", (list(user_ids),))
            return {row[0]: UserSummary(id=row[0], name=row[1]) for row in cursor.fetchall()}

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> bool:
        update_sql = """
            UPDATE users
            SET name = %s, email = %s, bio = %s, college = %s, major = %s, graduation_year = %s
            WHERE id = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            try:
                cursor.execute(
                    update_sql,
                    (
                        update.name,
                        update.email,
                        update.bio,
                        update.college,
                        update.major,
                        update.graduation_year,
                        user_id,
                    ),
                )
            except errors.UniqueViolation:
                conn.rollback()
                return False
            conn.commit()
            return True

    def update_preferences(self, user_id: UUID, preferences: list[str]) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                "UPDATE users SET preferences = %s::text[] WHERE id = %s",
                (preferences, user_id),
            )
            conn.commit()

    def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                "UPDATE users SET password_hash = %s WHERE id = %s",
                (password_hash, user_id),
            )
            conn.commit()

    def set_role(self, email: str, role: Role) -> User | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(
                f"UPDATE users SET role = %s WHERE email = %s RETURNING {_USER_COLUMNS}",
                (role.value, email),
            )
            row = cursor.fetchone()
            conn.commit()
        return _to_user(row) if row is not None else None

    def delete_user(self, user_id: UUID) -> bool:
        """
        Delete a user and strip them from every event's registrants.

        The user row is locked before any event row, the same order
        registration writes use. Events the user created keep
        ``created_by = NULL`` through the foreign key.
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM users WHERE id = %s FOR UPDATE", (user_id,))
            if cursor.fetchone() is None:
                conn.rollback()
                return False
            cursor.execute(
                """
                UPDATE events
                SET registered_users = array_remove(registered_users, %(user_id)s)
                WHERE %(user_id)s = ANY(registered_users)
                """,
                {"user_id": user_id},
            )
            logger.info("Removed user %s from %d event(s)", user_id, cursor.rowcount)
            cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
            conn.commit()
            return True

    def _fetch_one(self, query: str, param: Any) -> User | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (param,))
            row = cursor.fetchone()
        return _to_user(row) if row is not None else None
