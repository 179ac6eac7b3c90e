from typing import Any
from uuid import UUID
from fastapi import APIRouter, Body, Depends
from database.models import NotesUpdate
from endpoints.dependencies import get_workflow
from endpoints.serializers import client_response, session_response, action_item_response
from logic.workflow import ConsultationWorkflow

router = APIRouter(prefix="/clients", tags=["Clients"]) #all endpoints in this router start with /clients

@router.post("/intake", status_code=201) #POST endpoint to submit an intake form, creates or updates the client
def submit_intake(raw_answers: dict[str, Any] = Body(...), workflow: ConsultationWorkflow = Depends(get_workflow)):
    client = workflow.ingest_intake(raw_answers) #raises ValidationError naming the offending field
    return client_response(client)

@router.get("/{client_id}", status_code=200)
def get_client(client_id: UUID, workflow: ConsultationWorkflow = Depends(get_workflow)):
    client = workflow.get_client(client_id)
    return {
        "client": client_response(client),
        "sessions": [session_response(session) for session in workflow.client_sessions(client_id)],
    }

@router.patch("/{client_id}/notes", status_code=200)
def update_client_notes(client_id: UUID, notes_data: NotesUpdate, workflow: ConsultationWorkflow = Depends(get_workflow)):
    client = workflow.update_client_notes(client_id, notes_data.notes, notes_data.expected_version)
    return client_response(client)

@router.get("/{client_id}/action-items", status_code=200) #GET endpoint for outstanding action items across all sessions
def get_outstanding_action_items(client_id: UUID, workflow: ConsultationWorkflow = Depends(get_workflow)):
    return {
        "client_id": client_id,
        "outstanding_action_items": [action_item_response(item) for item in workflow.outstanding_action_items(client_id)],
    }
