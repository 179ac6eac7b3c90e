from typing import Iterable
from constants import DEFAULT_CHECKLIST_TEMPLATES
from database.models import ChecklistItemResult, ChecklistResult, ConsultationSession
from exceptions import UnknownItemError, UnknownTemplateError, ValidationError
from logger import get_logger

logger = get_logger(__name__)

class ChecklistTemplateRegistry:
    """Named, ordered checklist templates, each item is a (label, required) pair"""

    def __init__(self):
        self._templates: dict[str, tuple[tuple[str, bool], ...]] = {}

    def register(self, name: str, ordered_items: Iterable[tuple[str, bool]]):
        if not name or not name.strip():
            raise ValidationError("checklist template name must not be empty", field="name")

        items = []
        seen_labels = set()
        for label, required in ordered_items:
            if not label or not label.strip():
                raise ValidationError(f"checklist '{name}' has an item with an empty label", field="label")
            if label in seen_labels:
                raise ValidationError(f"checklist '{name}' has duplicate item '{label}'", field=label)
            seen_labels.add(label)
            items.append((label, bool(required)))

        self._templates[name] = tuple(items) #registering an existing name replaces its template
        logger.debug("Registered checklist template %s with %d item(s)", name, len(items))

    def get(self, name: str) -> tuple[tuple[str, bool], ...]:
        if name not in self._templates:
            raise UnknownTemplateError(name)
        return self._templates[name]

    def names(self) -> list[str]:
        return list(self._templates)

    def __contains__(self, name: str) -> bool:
        return name in self._templates

def default_registry() -> ChecklistTemplateRegistry: #registry loaded with the Pre, During, Post, CodeReview and Intake templates
    registry = ChecklistTemplateRegistry()
    for name, items in DEFAULT_CHECKLIST_TEMPLATES.items():
        registry.register(name, items)
    return registry

class ChecklistEngine:
    def __init__(self, registry: ChecklistTemplateRegistry):
        self.registry = registry

    def instantiate(self, template_name: str, session: ConsultationSession) -> ChecklistResult:
        template = self.registry.get(template_name)
        result = ChecklistResult(
            name=template_name,
            items=tuple(ChecklistItemResult(label=label, required=required) for label, required in template),
        )
        session.attach_checklist(result) #fresh result replaces any earlier one with the same name
        logger.info("Started checklist %s for session %s", template_name, session.id)
        return result

    def mark_item(self, result: ChecklistResult, item_label: str, done: bool, note: str | None = None) -> ChecklistResult:
        if result.get_item(item_label) is None:
            raise UnknownItemError(result.name, item_label)

        items = tuple(
            item.model_copy(update={"done": done, "note": note if note is not None else item.note}) #no note keeps the earlier one
            if item.label == item_label else item
            for item in result.items
        )
        return result.model_copy(update={"items": items}) #input result is left untouched

    def is_complete(self, result: ChecklistResult) -> bool:
        return result.is_complete()

    def missing_required(self, result: ChecklistResult) -> tuple[str, ...]:
        return tuple(result.iter_missing_required()) #tuple so callers can iterate more than once
