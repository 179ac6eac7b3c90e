"""
Pytest fixtures
"""
import os

os.environ.setdefault("RSE_DATABASE_URL", "sqlite://") #must be set before config is imported

from datetime import datetime, timedelta
import pytest
from database.database import build_engine, create_database_tables
from database.repository import InMemoryRepository, SQLModelRepository
from logic.workflow import ConsultationWorkflow


class FixedClock:
    """Clock that only moves when a test advances it"""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 10, 9, 0))


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def sql_repository():
    engine = build_engine("sqlite://")
    create_database_tables(engine)
    yield SQLModelRepository(engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_repository(request):
    """Runs a test once per persistence backend"""
    return request.getfixturevalue("repository" if request.param == "memory" else "sql_repository")


@pytest.fixture
def workflow(repository, clock):
    return ConsultationWorkflow(repository, clock)


@pytest.fixture
def intake_answers():
    return {
        "name": "Jane Doe",
        "email": "jane.doe@example.org",
        "research_area": "genomics",
        "consultation_type": "CodeReview",
        "experience_level": "intermediate",
    }


@pytest.fixture
def client_record(workflow, intake_answers):
    return workflow.ingest_intake(intake_answers)


@pytest.fixture
def scheduled_session(workflow, client_record, clock):
    return workflow.schedule_session(client_record.id, client_record.consultation_type, clock.now() + timedelta(days=1))


@pytest.fixture
def completed_session(workflow, scheduled_session, clock):
    """Session that went through start and end with a During checklist"""
    workflow.start_checklist(scheduled_session.id, "During")
    clock.advance(days=1)
    workflow.start_session(scheduled_session.id)
    clock.advance(minutes=40)
    return workflow.end_session(scheduled_session.id)
