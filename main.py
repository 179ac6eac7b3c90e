from fastapi import FastAPI
from config import settings
from database.database import create_database_tables
from endpoints import clients, sessions, action_items
from endpoints.errors import register_error_handlers
from logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

create_database_tables() #call function to create database tables

app = FastAPI( #creates new FastAPI app instance
    title=settings.app_title, #title shown in docs
    description="Tracks research software consultations from intake through follow-up",
)

register_error_handlers(app) #workflow exceptions become 404/409/422 responses

app.include_router(clients.router) #include routers from endpoints
app.include_router(sessions.router)
app.include_router(action_items.router)

@app.get("/")
def hello_rse_consult():
    return {"Hello": "RSE Consult"}
