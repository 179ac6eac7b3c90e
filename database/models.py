from pydantic import BaseModel, ConfigDict
from datetime import datetime, date
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from enums import ExperienceLevelEnum, SessionTypeEnum, SessionStateEnum, ActionItemPriorityEnum #fixed choices used by the models
from typing import Iterator
import uuid

class ChecklistItemResult(BaseModel): #one line of a checklist, frozen so updates always produce a new result
    model_config = ConfigDict(frozen=True)

    label: str
    required: bool = True
    done: bool = False
    note: str | None = None

class ChecklistResult(BaseModel): #a checklist template instantiated for one session, items keep template order
    model_config = ConfigDict(frozen=True)

    name: str
    items: tuple[ChecklistItemResult, ...] = ()

    def iter_missing_required(self) -> Iterator[str]:
        for item in self.items:
            if item.required and not item.done:
                yield item.label

    def is_complete(self) -> bool:
        return next(self.iter_missing_required(), None) is None #optional items never block completion

    def get_item(self, label: str) -> ChecklistItemResult | None:
        return next((item for item in self.items if item.label == label), None)

#all datetimes are naive local time

class Client(SQLModel, table=True): #client record built from the intake form, never deleted
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str
    email: str = Field(index=True)
    research_area: str
    experience_level: ExperienceLevelEnum | None = None
    consultation_type: SessionTypeEnum | None = None #type of consultation requested on the intake form
    intake_answers: dict = Field(default_factory=dict, sa_column=Column(JSON)) #normalized question key -> answer
    notes: str = ""
    next_session_number: int = 1 #monotonic counter, gives sessions their creation order
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)

class ConsultationSession(SQLModel, table=True): #one consultation, archived rather than deleted
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    client_id: uuid.UUID = Field(foreign_key="client.id", index=True)
    number: int = 1
    session_type: SessionTypeEnum
    state: SessionStateEnum = Field(default=SessionStateEnum.scheduled)
    scheduled_at: datetime | None = Field(default=None, sa_type=DateTime)
    started_at: datetime | None = Field(default=None, sa_type=DateTime)
    ended_at: datetime | None = Field(default=None, sa_type=DateTime)
    over_time: bool = False #set when the session ran past the soft duration limit
    notes: str = ""
    checklist_results: dict = Field(default_factory=dict, sa_column=Column(JSON)) #checklist name -> dumped ChecklistResult
    state_history: list = Field(default_factory=list, sa_column=Column(JSON)) #ordered {from_state, to_state, at} entries
    next_action_item_number: int = 1
    follow_up_session_id: uuid.UUID | None = None #session booked as this one's follow-up
    follow_up_of_id: uuid.UUID | None = None #session this one follows up
    archived: bool = False
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)

    def get_checklist(self, name: str) -> ChecklistResult | None:
        data = self.checklist_results.get(name)
        if data is None:
            return None
        return ChecklistResult.model_validate(data)

    def attach_checklist(self, result: ChecklistResult):
        #reassign instead of mutating in place so the JSON column is flagged as changed
        self.checklist_results = {**self.checklist_results, result.name: result.model_dump(mode="json")}

    def duration_minutes(self) -> float | None:
        if self.started_at is None or self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds() / 60

class ActionItem(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    session_id: uuid.UUID = Field(foreign_key="consultationsession.id", index=True)
    number: int #sequential within the owning session
    description: str
    priority: ActionItemPriorityEnum
    due_date: date | None = None
    done: bool = False
    closed: bool = False #closed items no longer count as outstanding
    completed_at: datetime | None = Field(default=None, sa_type=DateTime)
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)

class VersionedRequest(BaseModel): #expected_version enables optimistic concurrency checks, None skips the check
    expected_version: int | None = None

class SessionCreate(BaseModel):
    client_id: uuid.UUID
    session_type: SessionTypeEnum
    scheduled_at: datetime
    notes: str = ""

class NotesUpdate(VersionedRequest):
    notes: str

class ChecklistItemUpdate(VersionedRequest):
    done: bool = True
    note: str | None = None

class ActionItemCreate(VersionedRequest):
    description: str
    priority: ActionItemPriorityEnum
    due_date: date | None = None

class FollowUpSessionCreate(VersionedRequest):
    scheduled_at: datetime
    notes: str = ""
