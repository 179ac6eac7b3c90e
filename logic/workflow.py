"""
Consultation workflow

Loads records from the repository, applies one operation and saves every
record it touched in a single save_all call, so an operation either fully
succeeds or leaves the stored records unchanged.
"""
import uuid
from datetime import date, datetime
from typing import Any, Iterator, Mapping
from config import Settings, settings as default_settings
from constants import POST_CHECKLIST
from database.models import ActionItem, ChecklistResult, Client, ConsultationSession
from database.repository import Repository
from enums import ActionItemPriorityEnum, SessionStateEnum, SessionTypeEnum
from exceptions import ConcurrentModificationError, ValidationError
from logic import status
from logic.action_items import ActionItemTracker
from logic.checklists import ChecklistEngine, ChecklistTemplateRegistry, default_registry
from logic.clock import Clock, SystemClock
from logic.emails import render_follow_up_email
from logic.intake import ingest_intake
from logger import get_logger

logger = get_logger(__name__)


def check_version(kind: str, entity, expected_version: int | None):
    if expected_version is not None and expected_version != entity.version:
        raise ConcurrentModificationError(kind, entity.id, expected_version, entity.version)


class ConsultationWorkflow:
    def __init__(self, repository: Repository, clock: Clock | None = None,
                 registry: ChecklistTemplateRegistry | None = None, settings: Settings | None = None):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.registry = registry or default_registry()
        self.settings = settings or default_settings
        self.checklists = ChecklistEngine(self.registry)
        self.action_items = ActionItemTracker(repository)

    # ---------- clients ----------

    def ingest_intake(self, raw_answers: Mapping[str, Any]) -> Client:
        client = ingest_intake(raw_answers, self.repository, self.clock.now())
        self.repository.save(client)
        return client

    def get_client(self, client_id: uuid.UUID) -> Client:
        return self.repository.load("client", client_id)

    def update_client_notes(self, client_id: uuid.UUID, notes: str, expected_version: int | None = None) -> Client:
        client = self.get_client(client_id)
        check_version("client", client, expected_version)
        client.notes = notes
        client.updated_at = self.clock.now()
        self.repository.save(client)
        return client

    def client_sessions(self, client_id: uuid.UUID) -> list[ConsultationSession]:
        sessions = self.repository.query("session", client_id=client_id)
        return sorted(sessions, key=lambda session: session.number)

    def outstanding_action_items(self, client_id: uuid.UUID) -> Iterator[ActionItem]:
        return self.action_items.outstanding_for_client(self.get_client(client_id))

    # ---------- sessions ----------

    def get_session(self, session_id: uuid.UUID) -> ConsultationSession:
        return self.repository.load("session", session_id)

    def schedule_session(self, client_id: uuid.UUID, session_type: SessionTypeEnum, scheduled_at: datetime,
                         notes: str = "", follow_up_of_id: uuid.UUID | None = None) -> ConsultationSession:
        client = self.get_client(client_id)
        session = self.new_session(client, session_type, scheduled_at, notes, follow_up_of_id)
        self.repository.save_all([client, session])
        return session

    def new_session(self, client: Client, session_type: SessionTypeEnum, scheduled_at: datetime,
                    notes: str = "", follow_up_of_id: uuid.UUID | None = None) -> ConsultationSession:
        if scheduled_at is None:
            raise ValidationError("a scheduled time is required", field="scheduled_at")
        session = ConsultationSession(
            client_id=client.id,
            number=client.next_session_number,
            session_type=session_type,
            scheduled_at=scheduled_at,
            notes=notes,
            follow_up_of_id=follow_up_of_id,
            created_at=self.clock.now(),
        )
        client.next_session_number += 1
        logger.info("Scheduled %s session %s for client %s at %s",
                    session_type.value, session.id, client.id, scheduled_at.isoformat())
        return session

    def start_session(self, session_id: uuid.UUID, expected_version: int | None = None) -> ConsultationSession:
        session = self._load_session(session_id, expected_version)
        status.start_session(session, self.clock.now())
        self.repository.save(session)
        return session

    def end_session(self, session_id: uuid.UUID, expected_version: int | None = None) -> ConsultationSession:
        session = self._load_session(session_id, expected_version)
        status.end_session(session, self.clock.now(), self.settings.session_soft_limit_minutes)
        self.repository.save(session)
        return session

    def cancel_session(self, session_id: uuid.UUID, expected_version: int | None = None) -> ConsultationSession:
        session = self._load_session(session_id, expected_version)
        status.cancel_session(session, self.clock.now())
        self.repository.save(session)
        return session

    def mark_followed_up(self, session_id: uuid.UUID, expected_version: int | None = None) -> ConsultationSession:
        session = self._load_session(session_id, expected_version)
        status.mark_followed_up(session, self.action_items.has_items(session), self.clock.now())
        self.repository.save(session)
        return session

    def archive_session(self, session_id: uuid.UUID, expected_version: int | None = None) -> ConsultationSession:
        session = self.get_session(session_id)
        check_version("session", session, expected_version)
        status.archive_session(session)
        closed_items = []
        if session.follow_up_session_id is None: #nothing will pick up the open items anymore
            closed_items = self.action_items.close_open_items(session)
        self.repository.save_all([session, *closed_items])
        return session

    def append_session_notes(self, session_id: uuid.UUID, notes: str, expected_version: int | None = None) -> ConsultationSession:
        session = self._load_session(session_id, expected_version)
        session.notes = f"{session.notes}\n{notes}".strip() if session.notes else notes
        self.repository.save(session)
        return session

    def schedule_follow_up(self, session_id: uuid.UUID, scheduled_at: datetime, notes: str = "",
                           expected_version: int | None = None) -> ConsultationSession:
        session = self._load_session(session_id, expected_version)
        if session.state not in (SessionStateEnum.completed, SessionStateEnum.followed_up):
            raise ValidationError(f"cannot book a follow-up for a {session.state.value} session", field="state")
        if session.follow_up_session_id is not None:
            raise ValidationError("a follow-up session is already booked", field="follow_up_session_id")

        client = self.get_client(session.client_id)
        follow_up = self.new_session(client, SessionTypeEnum.follow_up, scheduled_at, notes, follow_up_of_id=session.id)
        session.follow_up_session_id = follow_up.id
        self._try_follow_up(session)
        self.repository.save_all([client, follow_up, session])
        return follow_up

    # ---------- checklists ----------

    def start_checklist(self, session_id: uuid.UUID, template_name: str, expected_version: int | None = None) -> ChecklistResult:
        session = self._load_session(session_id, expected_version)
        if session.get_checklist(template_name) is not None: #restarting would wipe the recorded items
            raise ValidationError(f"checklist '{template_name}' has already been started for this session", field="checklist")
        result = self.checklists.instantiate(template_name, session)
        self.repository.save(session)
        return result

    def get_checklist(self, session_id: uuid.UUID, template_name: str) -> ChecklistResult:
        return self._checklist_of(self.get_session(session_id), template_name)

    def mark_checklist_item(self, session_id: uuid.UUID, template_name: str, item_label: str, done: bool = True,
                            note: str | None = None, expected_version: int | None = None) -> tuple[ConsultationSession, ChecklistResult]:
        session = self._load_session(session_id, expected_version)
        result = self.checklists.mark_item(self._checklist_of(session, template_name), item_label, done, note)
        session.attach_checklist(result)
        if template_name == POST_CHECKLIST:
            self._try_follow_up(session)
        self.repository.save(session)
        return session, result

    # ---------- action items ----------

    def add_action_item(self, session_id: uuid.UUID, description: str, priority: ActionItemPriorityEnum,
                        due_date: date | None = None, expected_version: int | None = None) -> ActionItem:
        if not description or not description.strip():
            raise ValidationError("an action item needs a description", field="description")
        session = self._load_session(session_id, expected_version)
        item = self.action_items.add(session, description.strip(), priority, due_date, now=self.clock.now())
        self._try_follow_up(session, has_action_items=True)
        self.repository.save_all([session, item])
        return item

    def complete_action_item(self, item_id: uuid.UUID, expected_version: int | None = None) -> ActionItem:
        item = self.repository.load("action_item", item_id)
        if item.done: #a retried completion succeeds without a version check and does not bump the version
            return item
        check_version("action_item", item, expected_version)
        self.action_items.complete(item, now=self.clock.now())
        self.repository.save(item)
        return item

    def session_action_items(self, session_id: uuid.UUID) -> list[ActionItem]:
        return self.action_items.for_session(self.get_session(session_id))

    # ---------- emails ----------

    def follow_up_email(self, session_id: uuid.UUID) -> str:
        session = self.get_session(session_id)
        client = self.get_client(session.client_id)
        open_items = [item for item in self.action_items.for_session(session) if not item.done and not item.closed]
        follow_up = self.get_session(session.follow_up_session_id) if session.follow_up_session_id else None
        return render_follow_up_email(
            client,
            session,
            open_items,
            checklist=session.get_checklist(POST_CHECKLIST),
            follow_up=follow_up,
            consultant_name=self.settings.consultant_name,
        )

    # ---------- helpers ----------

    def _load_session(self, session_id: uuid.UUID, expected_version: int | None) -> ConsultationSession: #session about to be changed
        session = self.get_session(session_id)
        check_version("session", session, expected_version)
        status.check_not_archived(session)
        return session

    def _checklist_of(self, session: ConsultationSession, template_name: str) -> ChecklistResult:
        self.registry.get(template_name) #raises UnknownTemplateError for unregistered names
        result = session.get_checklist(template_name)
        if result is None:
            raise ValidationError(f"checklist '{template_name}' has not been started for this session", field="checklist")
        return result

    def _try_follow_up(self, session: ConsultationSession, has_action_items: bool | None = None):
        if has_action_items is None:
            has_action_items = self.action_items.has_items(session)
        status.try_mark_followed_up(session, has_action_items, self.clock.now())
