from database.database import engine
from database.repository import SQLModelRepository
from logic.checklists import default_registry
from logic.clock import SystemClock
from logic.workflow import ConsultationWorkflow

registry = default_registry() #templates are loaded once at startup

def get_workflow() -> ConsultationWorkflow: #FastAPI dependency, tests swap it through app.dependency_overrides
    return ConsultationWorkflow(SQLModelRepository(engine), SystemClock(), registry)
