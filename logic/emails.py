from jinja2 import Environment, StrictUndefined
from constants import FOLLOW_UP_EMAIL_TEMPLATE, PRIORITY_SEVERITY
from database.models import ActionItem, ChecklistResult, Client, ConsultationSession

PRIORITY_HEADINGS = {
    "immediate": "Immediate",
    "short-term": "Short-term",
    "long-term": "Long-term",
}

environment = Environment(trim_blocks=True, lstrip_blocks=True, undefined=StrictUndefined, autoescape=False) #plain text email, not HTML

def group_by_priority(action_items: list[ActionItem]) -> list[tuple[str, list[ActionItem]]]:
    groups = {}
    for item in sorted(action_items, key=lambda item: (-PRIORITY_SEVERITY[item.priority], item.number)):
        groups.setdefault(PRIORITY_HEADINGS[item.priority.value], []).append(item)
    return list(groups.items())

def render_follow_up_email(client: Client, session: ConsultationSession, action_items: list[ActionItem],
                           checklist: ChecklistResult | None = None, follow_up: ConsultationSession | None = None,
                           consultant_name: str = "") -> str:
    session_date = session.started_at or session.scheduled_at
    notes = [item.note for item in checklist.items if item.note] if checklist else []

    return environment.from_string(FOLLOW_UP_EMAIL_TEMPLATE).render(
        client_name=client.name,
        research_area=client.research_area,
        session_type=session.session_type.value,
        session_date=session_date.strftime("%Y-%m-%d") if session_date else "",
        action_items=group_by_priority(action_items),
        notes=notes,
        follow_up_date=follow_up.scheduled_at.strftime("%Y-%m-%d %H:%M") if follow_up and follow_up.scheduled_at else None,
        consultant_name=consultant_name,
    )
