"""
PostgreSQL event adapter - Implements EventRepository protocol.
"""

import logging
from typing import Any
from uuid import UUID

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from campus_events.domain.models import Category, Event, NewEvent

logger = logging.getLogger(__name__)

_EVENT_COLUMNS = """
    id, title, description, date, location, category, capacity,
    created_by, registered_users, created_at
"""

_UPDATABLE_COLUMNS = frozenset({"title", "description", "date", "location", "category", "capacity"})


def _to_event(row: dict[str, Any]) -> Event:
    return Event(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        date=row["date"],
        location=row["location"],
        category=Category(row["category"]),
        capacity=row["capacity"],
        created_by=row["created_by"],
        registered_users=list(row["registered_users"]),
        created_at=row["created_at"],
    )


class PostgresEventRepository:
    """
    Implements EventRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create_event(self, fields: NewEvent, created_by: UUID) -> UUID:
        insert_sql = """
            INSERT INTO events (title, description, date, location, category, capacity, created_by)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                insert_sql,
                (
                    fields.title,
                    fields.description,
                    fields.date,
                    fields.location,
                    fields.category.value,
                    fields.capacity,
                    created_by,
                ),
            )
            event_id = cursor.fetchone()[0]
            conn.commit()
            return event_id

    def get_event(self, event_id: UUID) -> Event | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = %s", (event_id,))
            row = cursor.fetchone()
        return _to_event(row) if row is not None else None

    def list_events(self) -> list[Event]:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(f"SELECT {_EVENT_COLUMNS} FROM events ORDER BY date ASC, created_at ASC")
            rows = cursor.fetchall()
        return [_to_event(row) for row in rows]

    def get_events(self, event_ids: list[UUID]) -> list[Event]:
        if not event_ids:
            return []
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(
                f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = ANY(%s)",
                (list(event_ids),),
            )
            found = {row["id"]: _to_event(row) for row in cursor.fetchall()}
        return [found[event_id] for event_id in dict.fromkeys(event_ids) if event_id in found]

    def update_event(self, event_id: UUID, changes: dict[str, Any]) -> bool:
        """
        Apply a partial update.

        When capacity is lowered, the WHERE clause refuses the write if
        the current registrants would no longer fit.
        """
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns not updatable: {sorted(unknown)}")

        values = {
            name: value.value if isinstance(value, Category) else value
            for name, value in changes.items()
        }
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder(name))
            for name in values
        )
        query = sql.SQL("UPDATE events SET {} WHERE id = {}").format(
            assignments, sql.Placeholder("event_id")
        )
        if values.get("capacity") is not None:
            query += sql.SQL(" AND cardinality(registered_users) <= {}").format(
                sql.Placeholder("capacity")
            )

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(query, {**values, "event_id": event_id})
            updated = cursor.rowcount == 1
            conn.commit()
            return updated

    def delete_event(self, event_id: UUID) -> bool:
        """
        Delete an event and strip it from every user's registered events.

        Users referencing the event are locked first, matching the
        user-then-event lock order used by registration writes.
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                "SELECT id FROM users WHERE %s = ANY(registered_events) ORDER BY id FOR UPDATE",
                (event_id,),
            )
            cursor.execute("DELETE FROM events WHERE id = %s RETURNING id", (event_id,))
            if cursor.fetchone() is None:
                conn.rollback()
                return False
            cursor.execute(
                """
                UPDATE users
                SET registered_events = array_remove(registered_events, %(event_id)s)
                WHERE %(event_id)s = ANY(registered_events)
                """,
                {"event_id": event_id},
            )
            logger.info("Removed event %s from %d user(s)", event_id, cursor.rowcount)
            conn.commit()
            return True
