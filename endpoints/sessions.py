from uuid import UUID
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from database.models import (
    SessionCreate,
    VersionedRequest,
    NotesUpdate,
    ChecklistItemUpdate,
    ActionItemCreate,
    FollowUpSessionCreate,
)
from endpoints.dependencies import get_workflow
from endpoints.serializers import session_response, checklist_response, action_item_response
from logic.workflow import ConsultationWorkflow

router = APIRouter(prefix="/sessions", tags=["Sessions"])

def expected_version(request_data: VersionedRequest | None) -> int | None: #transition bodies are optional
    return request_data.expected_version if request_data else None

@router.post("/", status_code=201) #POST endpoint to schedule a new session for an existing client
def schedule_session(session_data: SessionCreate, workflow: ConsultationWorkflow = Depends(get_workflow)):
    session = workflow.schedule_session(
        session_data.client_id, session_data.session_type, session_data.scheduled_at, session_data.notes
    )
    return session_response(session)

@router.get("/{session_id}", status_code=200)
def get_session(session_id: UUID, workflow: ConsultationWorkflow = Depends(get_workflow)):
    session = workflow.get_session(session_id)
    return {
        "session": session_response(session),
        "action_items": [action_item_response(item) for item in workflow.session_action_items(session_id)],
    }

@router.post("/{session_id}/start", status_code=200)
def start_session(session_id: UUID, request_data: VersionedRequest | None = None,
                  workflow: ConsultationWorkflow = Depends(get_workflow)):
    return session_response(workflow.start_session(session_id, expected_version(request_data)))

@router.post("/{session_id}/end", status_code=200)
def end_session(session_id: UUID, request_data: VersionedRequest | None = None,
                workflow: ConsultationWorkflow = Depends(get_workflow)):
    return session_response(workflow.end_session(session_id, expected_version(request_data)))

@router.post("/{session_id}/cancel", status_code=200)
def cancel_session(session_id: UUID, request_data: VersionedRequest | None = None,
                   workflow: ConsultationWorkflow = Depends(get_workflow)):
    return session_response(workflow.cancel_session(session_id, expected_version(request_data)))

@router.post("/{session_id}/follow-up", status_code=200) #explicitly mark a completed session as followed up
def mark_followed_up(session_id: UUID, request_data: VersionedRequest | None = None,
                     workflow: ConsultationWorkflow = Depends(get_workflow)):
    return session_response(workflow.mark_followed_up(session_id, expected_version(request_data)))

@router.post("/{session_id}/archive", status_code=200)
def archive_session(session_id: UUID, request_data: VersionedRequest | None = None,
                    workflow: ConsultationWorkflow = Depends(get_workflow)):
    return session_response(workflow.archive_session(session_id, expected_version(request_data)))

@router.patch("/{session_id}/notes", status_code=200)
def append_session_notes(session_id: UUID, notes_data: NotesUpdate, workflow: ConsultationWorkflow = Depends(get_workflow)):
    return session_response(workflow.append_session_notes(session_id, notes_data.notes, notes_data.expected_version))

@router.post("/{session_id}/checklists/{template_name}", status_code=201) #POST endpoint to start a checklist, all items undone
def start_checklist(session_id: UUID, template_name: str, request_data: VersionedRequest | None = None,
                    workflow: ConsultationWorkflow = Depends(get_workflow)):
    result = workflow.start_checklist(session_id, template_name, expected_version(request_data))
    return checklist_response(result)

@router.get("/{session_id}/checklists/{template_name}", status_code=200)
def get_checklist(session_id: UUID, template_name: str, workflow: ConsultationWorkflow = Depends(get_workflow)):
    return checklist_response(workflow.get_checklist(session_id, template_name))

@router.patch("/{session_id}/checklists/{template_name}/items/{item_label}", status_code=200)
def mark_checklist_item(session_id: UUID, template_name: str, item_label: str, item_data: ChecklistItemUpdate,
                        workflow: ConsultationWorkflow = Depends(get_workflow)):
    session, result = workflow.mark_checklist_item(
        session_id, template_name, item_label, item_data.done, item_data.note, item_data.expected_version
    )
    return {
        "session": {"id": session.id, "state": session.state, "version": session.version},
        "checklist": checklist_response(result),
    }

@router.post("/{session_id}/action-items", status_code=201)
def add_action_item(session_id: UUID, item_data: ActionItemCreate, workflow: ConsultationWorkflow = Depends(get_workflow)):
    item = workflow.add_action_item(
        session_id, item_data.description, item_data.priority, item_data.due_date, item_data.expected_version
    )
    session = workflow.get_session(session_id) #state may have moved to FollowedUp
    return {
        "session": {"id": session.id, "state": session.state, "version": session.version},
        "action_item": action_item_response(item),
    }

@router.post("/{session_id}/follow-up-session", status_code=201) #POST endpoint to book the follow-up consultation
def schedule_follow_up(session_id: UUID, follow_up_data: FollowUpSessionCreate,
                       workflow: ConsultationWorkflow = Depends(get_workflow)):
    follow_up = workflow.schedule_follow_up(
        session_id, follow_up_data.scheduled_at, follow_up_data.notes, follow_up_data.expected_version
    )
    session = workflow.get_session(session_id)
    return {
        "session": {"id": session.id, "state": session.state, "version": session.version},
        "follow_up_session": session_response(follow_up),
    }

@router.get("/{session_id}/follow-up-email", status_code=200, response_class=PlainTextResponse)
def get_follow_up_email(session_id: UUID, workflow: ConsultationWorkflow = Depends(get_workflow)):
    return workflow.follow_up_email(session_id)
