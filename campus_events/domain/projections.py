"""
Read-model projections - Resolve id references into summaries.

Registrants keep registration order. References to users that no
longer exist are left out of the view.
"""

from uuid import UUID

from .models import Event, EventView, UserSummary
from .ports import UserRepository


def project_event(event: Event, summaries: dict[UUID, UserSummary]) -> EventView:
    registrants = [summaries[uid] for uid in event.registered_users if uid in summaries]
    creator = summaries.get(event.created_by) if event.created_by is not None else None
    return EventView(event=event, registered_users=registrants, created_by=creator)


def project_events(events: list[Event], users: UserRepository) -> list[EventView]:
    """Project several events with a single user lookup."""
    wanted: list[UUID] = []
    for event in events:
        wanted.extend(event.registered_users)
        if event.created_by is not None:
            wanted.append(event.created_by)
    summaries = users.summarize_users(list(dict.fromkeys(wanted))) if wanted else {}
    return [project_event(event, summaries) for event in events]
