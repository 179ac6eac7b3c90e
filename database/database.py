from sqlmodel import SQLModel, create_engine
from sqlalchemy.pool import StaticPool
from config import settings

def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False} #FastAPI runs sync endpoints in a threadpool
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            #in-memory databases live inside one connection, so every session must share it
            return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_url, connect_args=connect_args)
    return create_engine(database_url, pool_pre_ping=True)

engine = build_engine(settings.database_url) #SQLAlchemy Engine allows for database interaction

def create_database_tables(target_engine=None):
    from database import models #noqa: F401 - importing registers the tables on SQLModel.metadata
    SQLModel.metadata.create_all(target_engine or engine) #creates tables that dont already exist
