from enums import SessionStateEnum, ActionItemPriorityEnum

DEFAULT_CHECKLIST_TEMPLATES = { #checklist templates loaded at startup, each item is (label, required)
    "Pre": [
        ("intake_form_reviewed", True),
        ("session_type_confirmed", True),
        ("repository_access_granted", True),
        ("agenda_sent", True),
        ("meeting_link_sent", True),
        ("background_reading_done", False),
    ],
    "During": [
        ("goals_confirmed", True),
        ("current_state_reviewed", True),
        ("recommendations_given", True),
        ("next_steps_agreed", True),
        ("recording_started", False),
        ("time_checked", False),
    ],
    "Post": [
        ("email_sent", True),
        ("notes_filed", True),
        ("recording_shared", False),
    ],
    "CodeReview": [
        ("repository_cloned", True),
        ("tests_run", True),
        ("structure_reviewed", True),
        ("style_checked", True),
        ("documentation_reviewed", True),
        ("performance_profiled", False),
        ("security_scanned", False),
    ],
    "Intake": [
        ("name", True),
        ("email", True),
        ("research_area", True),
        ("consultation_type", True),
        ("experience_level", False),
        ("project_description", False),
        ("repository_url", False),
    ],
}

DURING_CHECKLIST = "During" #must exist before a session can be ended
POST_CHECKLIST = "Post" #must be complete before a session counts as followed up

SESSION_TRANSITIONS = { #allowed state machine edges, anything not listed is an invalid transition
    SessionStateEnum.scheduled: {SessionStateEnum.in_progress, SessionStateEnum.cancelled},
    SessionStateEnum.in_progress: {SessionStateEnum.completed},
    SessionStateEnum.completed: {SessionStateEnum.followed_up},
    SessionStateEnum.followed_up: set(),
    SessionStateEnum.cancelled: set(),
}

ARCHIVABLE_STATES = {SessionStateEnum.completed, SessionStateEnum.followed_up, SessionStateEnum.cancelled}

PRIORITY_SEVERITY = { #higher severity sorts first in outstanding action items
    ActionItemPriorityEnum.immediate: 3,
    ActionItemPriorityEnum.short_term: 2,
    ActionItemPriorityEnum.long_term: 1,
}

REQUIRED_INTAKE_FIELDS = ["name", "email", "research_area", "consultation_type"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

FOLLOW_UP_EMAIL_TEMPLATE = """\
Subject: Follow-up from our {{ session_type }} session on {{ session_date }}

Hi {{ client_name }},

Thank you for meeting with me to talk about your work in {{ research_area }}.
{% if action_items %}

Here is a summary of the action items we agreed on:
{% for priority, items in action_items %}

{{ priority }}:
{% for item in items %}
  {{ loop.index }}. {{ item.description }}{% if item.due_date %} (due {{ item.due_date.isoformat() }}){% endif %}

{% endfor %}
{% endfor %}
{% else %}

We did not agree on any open action items this time.
{% endif %}
{% if notes %}

Notes:
{% for note in notes %}
  - {{ note }}
{% endfor %}
{% endif %}
{% if follow_up_date %}

Our follow-up session is booked for {{ follow_up_date }}.
{% endif %}

Let me know if anything is unclear.

Best regards,
{{ consultant_name }}
"""
