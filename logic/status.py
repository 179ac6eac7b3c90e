from datetime import datetime
from constants import SESSION_TRANSITIONS, ARCHIVABLE_STATES, DURING_CHECKLIST, POST_CHECKLIST
from database.models import ConsultationSession
from enums import SessionStateEnum
from exceptions import InvalidTransitionError, ValidationError
from logger import get_logger

logger = get_logger(__name__)

#every function checks its guards before touching the session so a failed call leaves it unchanged

def check_not_archived(session: ConsultationSession): #archived sessions are kept for the record only
    if session.archived:
        raise ValidationError(f"session {session.id} is archived and can no longer be changed", field="archived")

def check_transition(session: ConsultationSession, target: SessionStateEnum):
    if target not in SESSION_TRANSITIONS[session.state]:
        raise InvalidTransitionError(session.state.value, target.value)

def record_transition(session: ConsultationSession, target: SessionStateEnum, now: datetime):
    session.state_history = [ #reassigned so the JSON column is flagged as changed
        *session.state_history,
        {"from_state": session.state.value, "to_state": target.value, "at": now.isoformat()},
    ]
    logger.info("Session %s: %s -> %s", session.id, session.state.value, target.value)
    session.state = target

def start_session(session: ConsultationSession, now: datetime) -> ConsultationSession:
    check_transition(session, SessionStateEnum.in_progress)
    if session.scheduled_at is None:
        raise ValidationError("a session must be scheduled before it can start", field="scheduled_at")

    session.started_at = now
    record_transition(session, SessionStateEnum.in_progress, now)
    return session

def end_session(session: ConsultationSession, now: datetime, soft_limit_minutes: int) -> ConsultationSession:
    check_transition(session, SessionStateEnum.completed)
    if session.get_checklist(DURING_CHECKLIST) is None: #checklist must exist, it does not have to be complete
        raise InvalidTransitionError(
            session.state.value, SessionStateEnum.completed.value, f"the '{DURING_CHECKLIST}' checklist has not been started"
        )
    if session.started_at is not None and now < session.started_at:
        raise ValidationError("end time is before the start time", field="ended_at")

    session.ended_at = now
    duration = session.duration_minutes()
    session.over_time = duration is not None and duration > soft_limit_minutes
    if session.over_time:
        logger.warning("Session %s ran %.1f minutes, over the %d minute limit", session.id, duration, soft_limit_minutes)
    record_transition(session, SessionStateEnum.completed, now)
    return session

def cancel_session(session: ConsultationSession, now: datetime) -> ConsultationSession:
    check_transition(session, SessionStateEnum.cancelled)
    record_transition(session, SessionStateEnum.cancelled, now)
    return session

def follow_up_blocker(session: ConsultationSession, has_action_items: bool) -> str | None: #None when the session can be marked followed up
    if SessionStateEnum.followed_up not in SESSION_TRANSITIONS[session.state]:
        return f"session is {session.state.value}"
    post_checklist = session.get_checklist(POST_CHECKLIST)
    if post_checklist is None or not post_checklist.is_complete():
        return f"the '{POST_CHECKLIST}' checklist is not complete"
    if not has_action_items and session.follow_up_session_id is None:
        return "no action item or follow-up session is attached"
    return None

def mark_followed_up(session: ConsultationSession, has_action_items: bool, now: datetime) -> ConsultationSession:
    check_transition(session, SessionStateEnum.followed_up)
    reason = follow_up_blocker(session, has_action_items)
    if reason:
        raise InvalidTransitionError(session.state.value, SessionStateEnum.followed_up.value, reason)

    record_transition(session, SessionStateEnum.followed_up, now)
    return session

def try_mark_followed_up(session: ConsultationSession, has_action_items: bool, now: datetime) -> bool:
    if follow_up_blocker(session, has_action_items) is not None:
        return False
    record_transition(session, SessionStateEnum.followed_up, now)
    return True

def archive_session(session: ConsultationSession) -> ConsultationSession:
    if session.state not in ARCHIVABLE_STATES:
        raise InvalidTransitionError(session.state.value, "Archived", "only finished or cancelled sessions can be archived")
    session.archived = True
    logger.info("Session %s archived in state %s", session.id, session.state.value)
    return session

def visited_states(session: ConsultationSession) -> list[str]:
    if not session.state_history:
        return [session.state.value]
    return [session.state_history[0]["from_state"]] + [entry["to_state"] for entry in session.state_history]

def is_valid_state_path(states: list[str]) -> bool:
    for current, following in zip(states, states[1:]):
        if SessionStateEnum(following) not in SESSION_TRANSITIONS[SessionStateEnum(current)]:
            return False
    return True
