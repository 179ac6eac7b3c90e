"""
Action item tracker tests
"""
from datetime import date, timedelta
import pytest
from enums import ActionItemPriorityEnum, SessionTypeEnum
from exceptions import ValidationError
from logic.action_items import ActionItemTracker


def test_immediate_sorts_before_earlier_short_term(workflow, completed_session, clock):
    today = clock.now().date()
    immediate = workflow.add_action_item(
        completed_session.id, "Fix the failing test suite", ActionItemPriorityEnum.immediate, today + timedelta(days=2)
    )
    short_term = workflow.add_action_item(
        completed_session.id, "Add type hints", ActionItemPriorityEnum.short_term, today + timedelta(days=1)
    )

    outstanding = list(workflow.outstanding_action_items(completed_session.client_id))
    assert [item.id for item in outstanding] == [immediate.id, short_term.id]


def test_undated_items_sort_last_within_priority(workflow, completed_session):
    undated = workflow.add_action_item(completed_session.id, "Read the packaging guide", ActionItemPriorityEnum.short_term)
    later = workflow.add_action_item(completed_session.id, "Write docs", ActionItemPriorityEnum.short_term, date(2025, 4, 1))
    sooner = workflow.add_action_item(completed_session.id, "Add CI", ActionItemPriorityEnum.short_term, date(2025, 3, 20))
    long_term = workflow.add_action_item(completed_session.id, "Publish on PyPI", ActionItemPriorityEnum.long_term, date(2025, 3, 12))

    outstanding = list(workflow.outstanding_action_items(completed_session.client_id))
    assert [item.id for item in outstanding] == [sooner.id, later.id, undated.id, long_term.id]


def test_ties_follow_session_creation_order(workflow, client_record, completed_session, clock):
    second_session = workflow.schedule_session(client_record.id, SessionTypeEnum.debugging, clock.now() + timedelta(days=3))
    due = date(2025, 3, 25)
    later_item = workflow.add_action_item(second_session.id, "Reproduce the crash", ActionItemPriorityEnum.immediate, due)
    earlier_item = workflow.add_action_item(completed_session.id, "Share the notebook", ActionItemPriorityEnum.immediate, due)

    outstanding = list(workflow.outstanding_action_items(client_record.id))
    assert [item.id for item in outstanding] == [earlier_item.id, later_item.id]
    assert list(workflow.outstanding_action_items(client_record.id)) == outstanding #same input, same order


def test_numbers_are_sequential_per_session(workflow, client_record, completed_session, clock):
    other_session = workflow.schedule_session(client_record.id, SessionTypeEnum.training, clock.now() + timedelta(days=5))

    first = workflow.add_action_item(completed_session.id, "One", ActionItemPriorityEnum.long_term)
    second = workflow.add_action_item(completed_session.id, "Two", ActionItemPriorityEnum.long_term)
    other = workflow.add_action_item(other_session.id, "Elsewhere", ActionItemPriorityEnum.long_term)

    assert (first.number, second.number) == (1, 2)
    assert other.number == 1
    assert [item.number for item in workflow.session_action_items(completed_session.id)] == [1, 2]


def test_complete_is_idempotent(workflow, completed_session, clock):
    item = workflow.add_action_item(completed_session.id, "Tag a release", ActionItemPriorityEnum.immediate)

    once = workflow.complete_action_item(item.id)
    clock.advance(hours=1)
    twice = workflow.complete_action_item(item.id)

    assert once.model_dump() == twice.model_dump()
    assert twice.done is True
    assert workflow.repository.load("action_item", item.id).model_dump() == once.model_dump()


def test_tracker_complete_is_idempotent(repository, workflow, completed_session, clock):
    tracker = ActionItemTracker(repository)
    item = workflow.add_action_item(completed_session.id, "Tag a release", ActionItemPriorityEnum.immediate)

    tracker.complete(item, now=clock.now())
    completed_at = item.completed_at
    tracker.complete(item, now=clock.advance(days=1))
    assert item.done is True
    assert item.completed_at == completed_at


def test_done_items_are_not_outstanding(workflow, completed_session):
    done = workflow.add_action_item(completed_session.id, "Done soon", ActionItemPriorityEnum.immediate)
    open_item = workflow.add_action_item(completed_session.id, "Still open", ActionItemPriorityEnum.long_term)
    workflow.complete_action_item(done.id)

    outstanding = list(workflow.outstanding_action_items(completed_session.client_id))
    assert [item.id for item in outstanding] == [open_item.id]


def test_outstanding_only_includes_clients_own_items(workflow, completed_session, clock):
    other_client = workflow.ingest_intake({
        "name": "Sam Lee",
        "email": "sam.lee@example.org",
        "research_area": "climate modelling",
        "consultation_type": "Debugging",
    })
    other_session = workflow.schedule_session(other_client.id, SessionTypeEnum.debugging, clock.now())
    workflow.add_action_item(other_session.id, "Not for Jane", ActionItemPriorityEnum.immediate)
    mine = workflow.add_action_item(completed_session.id, "For Jane", ActionItemPriorityEnum.long_term)

    outstanding = list(workflow.outstanding_action_items(completed_session.client_id))
    assert [item.id for item in outstanding] == [mine.id]


def test_blank_description_is_rejected(workflow, completed_session):
    with pytest.raises(ValidationError) as exc_info:
        workflow.add_action_item(completed_session.id, "   ", ActionItemPriorityEnum.immediate)
    assert exc_info.value.field == "description"
    assert workflow.get_session(completed_session.id).next_action_item_number == 1


def test_retried_completion_with_same_expected_version(workflow, completed_session):
    item = workflow.add_action_item(completed_session.id, "Tag a release", ActionItemPriorityEnum.immediate)
    assert item.version == 1

    first = workflow.complete_action_item(item.id, expected_version=1)
    retried = workflow.complete_action_item(item.id, expected_version=1) #the client resends the same request
    assert retried.done is True
    assert retried.version == first.version == 2
