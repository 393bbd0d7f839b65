"""
Reference repair - Restore user/event symmetry after partial failures.

Event registrants are authoritative: they are the capacity-bounded side.
A repair plan drops ids that point at deleted records, removes duplicates,
drops user back-references that the event does not confirm, and appends
back-references that are missing. Existing order is preserved throughout.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from .ports import RegistrationRepository

logger = logging.getLogger(__name__)


@dataclass
class RepairPlan:
    """Reference lists to overwrite, keyed by record id."""

    events: dict[UUID, list[UUID]] = field(default_factory=dict)
    users: dict[UUID, list[UUID]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.events and not self.users


def _dedupe(ids: list[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))


def plan_reference_repairs(
    event_registrants: dict[UUID, list[UUID]],
    user_events: dict[UUID, list[UUID]],
) -> RepairPlan:
    plan = RepairPlan()
    confirmed: dict[UUID, list[UUID]] = {user_id: [] for user_id in user_events}

    for event_id, registrants in event_registrants.items():
        cleaned = _dedupe([uid for uid in registrants if uid in user_events])
        if cleaned != registrants:
            plan.events[event_id] = cleaned
        for user_id in cleaned:
            confirmed[user_id].append(event_id)

    for user_id, registered in user_events.items():
        expected = set(confirmed[user_id])
        kept = _dedupe([eid for eid in registered if eid in expected])
        already = set(kept)
        missing = [eid for eid in confirmed[user_id] if eid not in already]
        repaired = kept + missing
        if repaired != registered:
            plan.users[user_id] = repaired

    return plan


def repair_references(repository: RegistrationRepository) -> RepairPlan:
    """Recompute and apply a repair plan. Returns the applied plan."""
    plan = repository.repair_references(plan_reference_repairs)
    if plan.is_empty:
        logger.info("References consistent, nothing to repair")
    else:
        logger.warning(
            "Repaired references on %d event(s) and %d user(s)",
            len(plan.events),
            len(plan.users),
        )
    return plan
