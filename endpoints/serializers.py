from database.models import ActionItem, ChecklistResult, Client, ConsultationSession

#JSON shapes returned by the routers, kept in one place so every endpoint answers the same way

def client_response(client: Client) -> dict:
    return {
        "id": client.id,
        "name": client.name,
        "email": client.email,
        "research_area": client.research_area,
        "experience_level": client.experience_level,
        "consultation_type": client.consultation_type,
        "intake_answers": client.intake_answers,
        "notes": client.notes,
        "version": client.version,
        "created_at": client.created_at,
        "updated_at": client.updated_at,
    }

def checklist_response(result: ChecklistResult) -> dict:
    missing_required = list(result.iter_missing_required())
    return {
        "name": result.name,
        "is_complete": not missing_required,
        "missing_required": missing_required,
        "items": [
            {"label": item.label, "required": item.required, "done": item.done, "note": item.note}
            for item in result.items
        ],
    }

def session_response(session: ConsultationSession) -> dict:
    return {
        "id": session.id,
        "client_id": session.client_id,
        "number": session.number,
        "session_type": session.session_type,
        "state": session.state,
        "scheduled_at": session.scheduled_at,
        "started_at": session.started_at,
        "ended_at": session.ended_at,
        "over_time": session.over_time,
        "notes": session.notes,
        "checklists": {
            name: checklist_response(session.get_checklist(name)) for name in session.checklist_results
        },
        "state_history": session.state_history,
        "follow_up_session_id": session.follow_up_session_id,
        "follow_up_of_id": session.follow_up_of_id,
        "archived": session.archived,
        "version": session.version,
        "created_at": session.created_at,
    }

def action_item_response(item: ActionItem) -> dict:
    return {
        "id": item.id,
        "session_id": item.session_id,
        "number": item.number,
        "description": item.description,
        "priority": item.priority,
        "due_date": item.due_date,
        "done": item.done,
        "closed": item.closed,
        "completed_at": item.completed_at,
        "version": item.version,
        "created_at": item.created_at,
    }
