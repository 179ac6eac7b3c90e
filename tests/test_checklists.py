"""
Checklist engine and template registry tests
"""
import itertools
import uuid
from datetime import datetime
import pytest
from constants import DEFAULT_CHECKLIST_TEMPLATES
from database.models import ConsultationSession
from enums import SessionTypeEnum
from exceptions import UnknownItemError, UnknownTemplateError, ValidationError
from logic.checklists import ChecklistEngine, ChecklistTemplateRegistry, default_registry


@pytest.fixture
def engine():
    return ChecklistEngine(default_registry())


@pytest.fixture
def session():
    return ConsultationSession(
        client_id=uuid.uuid4(),
        session_type=SessionTypeEnum.discovery,
        scheduled_at=datetime(2025, 3, 11, 10, 0),
    )


def test_default_registry_has_five_templates():
    registry = default_registry()
    assert registry.names() == ["Pre", "During", "Post", "CodeReview", "Intake"]


def test_instantiate_attaches_fresh_result(engine, session):
    result = engine.instantiate("Post", session)
    assert [item.label for item in result.items] == ["email_sent", "notes_filed", "recording_shared"]
    assert not any(item.done for item in result.items)
    assert session.get_checklist("Post") == result


def test_instantiate_unknown_template(engine, session):
    with pytest.raises(UnknownTemplateError) as exc_info:
        engine.instantiate("Retrospective", session)
    assert exc_info.value.template_name == "Retrospective"
    assert session.checklist_results == {}


def test_post_checklist_completion(engine, session):
    result = engine.instantiate("Post", session)

    result = engine.mark_item(result, "email_sent", True)
    assert engine.is_complete(result) is False
    assert engine.missing_required(result) == ("notes_filed",)

    result = engine.mark_item(result, "notes_filed", True)
    assert engine.is_complete(result) is True
    assert engine.missing_required(result) == ()
    assert result.get_item("recording_shared").done is False #optional item never blocks completion


def test_mark_item_returns_new_result(engine, session):
    original = engine.instantiate("Post", session)
    updated = engine.mark_item(original, "email_sent", True, note="sent Friday")

    assert original.get_item("email_sent").done is False
    assert updated.get_item("email_sent").done is True
    assert updated.get_item("email_sent").note == "sent Friday"
    assert session.get_checklist("Post") == original #session only changes when the caller attaches the result


def test_mark_item_keeps_note_when_none_given(engine, session):
    result = engine.instantiate("Post", session)
    result = engine.mark_item(result, "notes_filed", True, note="filed in shared drive")
    result = engine.mark_item(result, "notes_filed", False)
    assert result.get_item("notes_filed").done is False
    assert result.get_item("notes_filed").note == "filed in shared drive"


def test_mark_unknown_item(engine, session):
    result = engine.instantiate("Post", session)
    with pytest.raises(UnknownItemError) as exc_info:
        engine.mark_item(result, "invoice_sent", True)
    assert exc_info.value.checklist_name == "Post"
    assert exc_info.value.item_label == "invoice_sent"


def test_missing_required_keeps_template_order(engine, session):
    result = engine.instantiate("CodeReview", session)
    result = engine.mark_item(result, "tests_run", True)
    missing = engine.missing_required(result)
    assert missing == ("repository_cloned", "structure_reviewed", "style_checked", "documentation_reviewed")
    assert list(missing) == list(missing) #can be iterated more than once


@pytest.mark.parametrize("template_name", list(DEFAULT_CHECKLIST_TEMPLATES))
def test_complete_iff_nothing_missing(engine, session, template_name):
    fresh = engine.instantiate(template_name, session)
    labels = [item.label for item in fresh.items]
    for done_flags in itertools.product([False, True], repeat=len(labels)):
        result = fresh
        for label, done in zip(labels, done_flags):
            if done:
                result = engine.mark_item(result, label, True)
        assert engine.is_complete(result) == (len(engine.missing_required(result)) == 0)


def test_register_custom_template(session):
    registry = ChecklistTemplateRegistry()
    registry.register("Training", [("materials_shared", True), ("exercises_done", False)])
    engine = ChecklistEngine(registry)

    result = engine.instantiate("Training", session)
    assert engine.missing_required(result) == ("materials_shared",)
    assert "Training" in registry
    assert "Post" not in registry


def test_register_replaces_existing_template():
    registry = ChecklistTemplateRegistry()
    registry.register("Post", [("email_sent", True)])
    registry.register("Post", [("notes_filed", True)])
    assert registry.get("Post") == (("notes_filed", True),)


def test_register_rejects_duplicate_labels():
    registry = ChecklistTemplateRegistry()
    with pytest.raises(ValidationError) as exc_info:
        registry.register("Post", [("email_sent", True), ("email_sent", False)])
    assert exc_info.value.field == "email_sent"
    assert "Post" not in registry


def test_register_rejects_empty_names():
    registry = ChecklistTemplateRegistry()
    with pytest.raises(ValidationError) as exc_info:
        registry.register("", [("email_sent", True)])
    assert exc_info.value.field == "name"

    with pytest.raises(ValidationError) as exc_info:
        registry.register("Post", [("  ", True)])
    assert exc_info.value.field == "label"
