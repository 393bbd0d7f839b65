"""
Event domain service - Admin-gated event lifecycle.

Validation collects every failing field before raising, so callers
receive one InvalidInput with per-field messages.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from .access import ensure_admin
from .exceptions import EventNotFound, FieldError, InvalidInput, UserNotFound
from .models import Category, EventView, NewEvent, User
from .ports import EventRepository, UserRepository
from .projections import project_events

logger = logging.getLogger(__name__)

_REQUIRED_TEXT = {
    "title": "Title is required",
    "description": "Description is required",
    "location": "Location is required",
}
_EDITABLE = ("title", "description", "date", "location", "category", "capacity")


def parse_event_date(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 instant.

    Accepts a trailing 'Z' and date-only strings. Naive values are
    taken as UTC. Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# events.capacity is a Postgres INTEGER
MAX_CAPACITY = 2**31 - 1


def _parse_capacity(value: Any) -> int | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, str):
        value = int(value.strip())
    if not isinstance(value, int) or not 1 <= value <= MAX_CAPACITY:
        raise ValueError(value)
    return value


def validate_event_fields(raw: dict[str, Any], partial: bool = False) -> dict[str, Any]:
    """
    Validate submitted event fields.

    Args:
        raw: Submitted fields. Unknown keys are ignored.
        partial: When True only the supplied fields are checked.

    Returns:
        Cleaned values keyed by field name

    Raises:
        InvalidInput: Listing every failing field
    """
    errors: list[FieldError] = []
    cleaned: dict[str, Any] = {}

    for name, message in _REQUIRED_TEXT.items():
        if partial and name not in raw:
            continue
        value = raw.get(name)
        if not isinstance(value, str) or not value.strip():
            errors.append(FieldError(name, message))
        else:
            cleaned[name] = value.strip()

    if not partial or "category" in raw:
        try:
            cleaned["category"] = Category(raw.get("category"))
        except ValueError:
            errors.append(FieldError("category", "Category is required"))

    if not partial or "date" in raw:
        parsed = parse_event_date(raw.get("date"))
        if parsed is None:
            errors.append(FieldError("date", "Invalid date format"))
        else:
            cleaned["date"] = parsed

    if "capacity" in raw:
        if raw["capacity"] is None or raw["capacity"] == "":
            cleaned["capacity"] = None
        else:
            try:
                cleaned["capacity"] = _parse_capacity(raw["capacity"])
            except (TypeError, ValueError):
                errors.append(
                    FieldError("capacity", "Capacity must be a positive number if provided")
                )

    if errors:
        raise InvalidInput(errors, "Invalid event data")
    return cleaned


@dataclass
class EventService:
    """Domain service for event create, read, update and delete."""

    events: EventRepository
    users: UserRepository

    def list_events(self) -> list[EventView]:
        return project_events(self.events.list_events(), self.users)

    def get_event(self, event_id: UUID) -> EventView:
        event = self.events.get_event(event_id)
        if event is None:
            raise EventNotFound()
        return project_events([event], self.users)[0]

    def create_event(self, actor_id: UUID, raw: dict[str, Any]) -> EventView:
        """
        Create an event on behalf of an admin.

        Raises:
            Forbidden: If the actor is not an admin
            InvalidInput: If any field fails validation
        """
        self._admin(actor_id)
        cleaned = validate_event_fields(raw)
        fields = NewEvent(
            title=cleaned["title"],
            description=cleaned["description"],
            date=cleaned["date"],
            location=cleaned["location"],
            category=cleaned["category"],
            capacity=cleaned.get("capacity"),
        )
        event_id = self.events.create_event(fields, created_by=actor_id)
        logger.info("Event %s created by %s", event_id, actor_id)
        return self.get_event(event_id)

    def update_event(self, actor_id: UUID, event_id: UUID, raw: dict[str, Any]) -> EventView:
        """
        Merge the supplied fields into an existing event.

        ``capacity: None`` removes the limit. A capacity below the
        current registrant count is rejected.
        """
        self._admin(actor_id)
        if self.events.get_event(event_id) is None:
            raise EventNotFound()

        changes = validate_event_fields(
            {key: value for key, value in raw.items() if key in _EDITABLE},
            partial=True,
        )
        if changes and not self.events.update_event(event_id, changes):
            current = self.events.get_event(event_id)
            if current is None:
                raise EventNotFound()
            raise InvalidInput(
                [
                    FieldError(
                        "capacity",
                        f"Capacity cannot be lower than the {len(current.registered_users)} "
                        "current registrations",
                    )
                ],
                "Invalid event data",
            )
        return self.get_event(event_id)

    def delete_event(self, actor_id: UUID, event_id: UUID) -> None:
        """Delete an event, removing it from every user's registered events."""
        self._admin(actor_id)
        if not self.events.delete_event(event_id):
            raise EventNotFound()
        logger.info("Event %s deleted by %s", event_id, actor_id)

    def _admin(self, actor_id: UUID) -> User:
        actor = self.users.get_user(actor_id)
        if actor is None:
            raise UserNotFound()
        ensure_admin(actor)
        return actor
