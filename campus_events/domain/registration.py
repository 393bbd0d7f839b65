"""
Registration domain service - Event RSVP consistency rules.

This module contains the core business logic that keeps users and
events cross-referenced under capacity constraints.

Registration State (per event, per user)
========================================

States:
- NOT_REGISTERED: user id absent from the event's registrants
- REGISTERED: user id present in the event's registrants and the
  event id present in the user's registered events

Transitions:
    NOT_REGISTERED -> REGISTERED      (register)
    REGISTERED     -> NOT_REGISTERED  (cancel)

Guards (checked in order, never states):
    register: event exists, user exists, capacity not reached, not already registered
    cancel:   event exists, user exists, currently registered

Note: Guards and both reference writes are evaluated by the repository
in one transaction. The capacity/duplicate guard is part of the
conditional UPDATE itself, so concurrent registrations cannot overfill
an event.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from .exceptions import (
    AlreadyRegistered,
    CapacityExceeded,
    EventNotFound,
    NotRegistered,
    UserNotFound,
)
from .models import EventView, RegistrationOutcome
from .ports import EventRepository, RegistrationRepository, UserRepository
from .projections import project_events

logger = logging.getLogger(__name__)

_FAILURES = {
    RegistrationOutcome.EVENT_NOT_FOUND: EventNotFound,
    RegistrationOutcome.USER_NOT_FOUND: UserNotFound,
    RegistrationOutcome.FULL: CapacityExceeded,
    RegistrationOutcome.ALREADY_REGISTERED: AlreadyRegistered,
    RegistrationOutcome.NOT_REGISTERED: NotRegistered,
}


@dataclass
class RegistrationService:
    """
    Domain service for event registration.

    Translates repository outcomes into domain exceptions and
    re-reads the event after every successful write.
    """

    registrations: RegistrationRepository
    events: EventRepository
    users: UserRepository

    def register(self, event_id: UUID, user_id: UUID) -> EventView:
        """
        Register a user for an event.

        Returns:
            The event re-read with registrants resolved

        Raises:
            EventNotFound: If the event does not exist
            UserNotFound: If the user does not exist
            CapacityExceeded: If the event is full
            AlreadyRegistered: If the user is already registered
        """
        outcome = self.registrations.add_registration(event_id, user_id)
        self._raise_for(outcome, RegistrationOutcome.REGISTERED)
        logger.info("User %s registered for event %s", user_id, event_id)
        return self._view(event_id)

    def cancel(self, event_id: UUID, user_id: UUID) -> EventView:
        """
        Cancel a user's registration for an event.

        Raises:
            EventNotFound: If the event does not exist
            UserNotFound: If the user does not exist
            NotRegistered: If the user is not registered
        """
        outcome = self.registrations.remove_registration(event_id, user_id)
        self._raise_for(outcome, RegistrationOutcome.CANCELLED)
        logger.info("User %s cancelled registration for event %s", user_id, event_id)
        return self._view(event_id)

    def _raise_for(self, outcome: RegistrationOutcome, success: RegistrationOutcome) -> None:
        if outcome is success:
            return
        error = _FAILURES.get(outcome)
        if error is None:
            raise RuntimeError(f"Unexpected registration outcome: {outcome}")
        raise error()

    def _view(self, event_id: UUID) -> EventView:
        event = self.events.get_event(event_id)
        if event is None:
            # Deleted between the write and the re-read
            raise EventNotFound()
        return project_events([event], self.users)[0]
