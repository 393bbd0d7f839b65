"""
Unit tests for reference repair planning.

Event registrants are authoritative; user back-references are
rebuilt to match them.
"""

from uuid import uuid4

from campus_events.domain.repair import RepairPlan, plan_reference_repairs, repair_references


class TestPlanReferenceRepairs:
    def test_consistent_state_needs_nothing(self) -> None:
        user, event = uuid4(), uuid4()

        plan = plan_reference_repairs({event: [user]}, {user: [event]})

        assert plan.is_empty

    def test_missing_back_reference_appended(self) -> None:
        """Event lists the user but the user lost the event."""
        user, first, second = uuid4(), uuid4(), uuid4()

        plan = plan_reference_repairs(
            {first: [user], second: [user]},
            {user: [second]},
        )

        assert plan.events == {}
        assert plan.users == {user: [second, first]}

    def test_unconfirmed_back_reference_dropped(self) -> None:
        """User lists an event that does not list the user."""
        user, event = uuid4(), uuid4()

        plan = plan_reference_repairs({event: []}, {user: [event]})

        assert plan.users == {user: []}

    def test_reference_to_deleted_event_dropped(self) -> None:
        user = uuid4()
        plan = plan_reference_repairs({}, {user: [uuid4()]})
        assert plan.users == {user: []}

    def test_registrant_that_no_longer_exists_dropped(self) -> None:
        user, ghost, event = uuid4(), uuid4(), uuid4()

        plan = plan_reference_repairs({event: [ghost, user]}, {user: [event]})

        assert plan.events == {event: [user]}
        assert plan.users == {}

    def test_duplicates_removed_order_kept(self) -> None:
        a, b, event = uuid4(), uuid4(), uuid4()

        plan = plan_reference_repairs(
            {event: [a, b, a]},
            {a: [event, event], b: [event]},
        )

        assert plan.events == {event: [a, b]}
        assert plan.users == {a: [event]}


class TestRepairReferences:
    def test_applies_plan_through_repository(self, store) -> None:
        user = store.add_user()
        event = store.add_event(capacity=5)
        store.events[event.id].registered_users.append(user.id)

        plan = repair_references(store)

        assert plan.users == {user.id: [event.id]}
        assert store.users[user.id].registered_events == [event.id]

    def test_nothing_to_repair(self, store) -> None:
        store.add_user()
        store.add_event()

        plan = repair_references(store)

        assert plan == RepairPlan()
        assert plan.is_empty
