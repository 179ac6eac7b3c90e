from uuid import UUID
from fastapi import APIRouter, Depends
from database.models import VersionedRequest
from endpoints.dependencies import get_workflow
from endpoints.serializers import action_item_response
from logic.workflow import ConsultationWorkflow

router = APIRouter(prefix="/action-items", tags=["Action Items"])

@router.post("/{item_id}/complete", status_code=200) #safe to retry, completing a done item changes nothing
def complete_action_item(item_id: UUID, request_data: VersionedRequest | None = None,
                         workflow: ConsultationWorkflow = Depends(get_workflow)):
    item = workflow.complete_action_item(item_id, request_data.expected_version if request_data else None)
    return action_item_response(item)
