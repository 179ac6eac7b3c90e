from datetime import date, datetime
from typing import Iterator
from constants import PRIORITY_SEVERITY
from database.models import ActionItem, Client, ConsultationSession
from database.repository import Repository
from enums import ActionItemPriorityEnum
from logger import get_logger

logger = get_logger(__name__)

def outstanding_sort_key(item: ActionItem, session_number: int) -> tuple:
    return (
        -PRIORITY_SEVERITY[item.priority], #most severe priority first
        item.due_date is None, #undated items go last within their priority tier
        item.due_date or date.max,
        session_number, #then session creation order
        item.number,
    )

class ActionItemTracker:
    """Action items recorded per session and the outstanding work across a client's sessions"""

    def __init__(self, repository: Repository):
        self.repository = repository

    def add(self, session: ConsultationSession, description: str, priority: ActionItemPriorityEnum,
            due_date: date | None = None, now: datetime | None = None) -> ActionItem:
        item = ActionItem(
            session_id=session.id,
            number=session.next_action_item_number,
            description=description,
            priority=priority,
            due_date=due_date,
            created_at=now or datetime.now(),
        )
        session.next_action_item_number += 1 #monotonic per session, numbers are never reused
        logger.info("Added action item %d (%s) to session %s", item.number, priority.value, session.id)
        return item

    def complete(self, item: ActionItem, now: datetime | None = None) -> ActionItem:
        if item.done: #already done, completing again changes nothing
            return item
        item.done = True
        item.closed = True
        item.completed_at = now or datetime.now()
        logger.info("Completed action item %d of session %s", item.number, item.session_id)
        return item

    def close_open_items(self, session: ConsultationSession) -> list[ActionItem]:
        closed_items = []
        for item in self.for_session(session):
            if not item.closed:
                item.closed = True
                closed_items.append(item)
        return closed_items

    def for_session(self, session: ConsultationSession) -> list[ActionItem]:
        items = self.repository.query("action_item", session_id=session.id)
        return sorted(items, key=lambda item: item.number)

    def has_items(self, session: ConsultationSession) -> bool:
        return bool(self.for_session(session))

    def outstanding_for_client(self, client: Client) -> Iterator[ActionItem]:
        sessions = self.repository.query("session", client_id=client.id)
        session_numbers = {session.id: session.number for session in sessions}
        items = self.repository.query("action_item", session_id=set(session_numbers), done=False, closed=False)
        yield from sorted(items, key=lambda item: outstanding_sort_key(item, session_numbers[item.session_id]))
