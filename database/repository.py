"""
Persistence collaborators

The workflow only talks to the small save/load/query interface below, so the
same rules run against SQLite (or any SQLAlchemy URL) and against a plain
in-memory store.
"""
import copy
import uuid
from typing import Callable, Iterable, Protocol, TypeVar
from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, select
from database.models import Client, ConsultationSession, ActionItem
from exceptions import ConcurrentModificationError, RecordNotFoundError
from logger import get_logger

logger = get_logger(__name__)

RECORD_KINDS: dict[str, type[SQLModel]] = {
    "client": Client,
    "session": ConsultationSession,
    "action_item": ActionItem,
}

T = TypeVar("T", bound=SQLModel)


def kind_of(entity: SQLModel) -> str:
    for kind, model in RECORD_KINDS.items():
        if isinstance(entity, model):
            return kind
    raise TypeError(f"Unsupported record type: {type(entity).__name__}")


def model_for(kind: str) -> type[SQLModel]:
    try:
        return RECORD_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind: {kind}") from None


def sort_key(entity: SQLModel) -> tuple:
    #stable order for query results, independent of storage iteration order
    return (getattr(entity, "created_at", None), getattr(entity, "number", 0), str(entity.id))


class Repository(Protocol):
    def save(self, entity: T) -> uuid.UUID: ...

    def save_all(self, entities: Iterable[SQLModel]) -> list[uuid.UUID]: ...

    def load(self, kind: str, record_id: uuid.UUID) -> SQLModel: ...

    def query(self, kind: str, predicate: Callable[[SQLModel], bool] | None = None, **filters) -> list[SQLModel]: ...


def matches_filters(entity: SQLModel, filters: dict) -> bool:
    #a list, tuple or set value means "one of", anything else is an equality match
    for field_name, value in filters.items():
        field_value = getattr(entity, field_name)
        if isinstance(value, (list, tuple, set, frozenset)):
            if field_value not in value:
                return False
        elif field_value != value:
            return False
    return True


class SQLModelRepository:
    """Stores records in the tables defined in database.models"""

    def __init__(self, engine: Engine):
        self.engine = engine

    def save(self, entity: SQLModel) -> uuid.UUID:
        return self.save_all([entity])[0]

    def save_all(self, entities: Iterable[SQLModel]) -> list[uuid.UUID]:
        """
        Save records in one transaction, either all of them are written or none

        Existing rows are updated with UPDATE ... WHERE version = <version the
        caller loaded>, so a writer that committed in between makes the update
        match no row and the whole batch is rolled back.
        """
        entities = list(entities)
        with Session(self.engine) as session:
            connection = session.connection()
            for entity in entities:
                model = type(entity)
                values = {
                    field_name: copy.deepcopy(getattr(entity, field_name))
                    for field_name in model.model_fields
                    if field_name not in ("id", "version")
                }
                result = connection.execute(
                    update(model)
                    .where(model.id == entity.id, model.version == entity.version)
                    .values(**values, version=entity.version + 1)
                )
                if result.rowcount == 1:
                    continue
                stored_version = session.exec(select(model.version).where(model.id == entity.id)).first()
                if stored_version is not None:
                    raise ConcurrentModificationError(kind_of(entity), entity.id, entity.version, stored_version)
                stored = model.model_validate(copy.deepcopy(entity.model_dump()))
                stored.version = entity.version + 1
                session.add(stored)
            session.commit()

        for entity in entities:
            entity.version += 1
        logger.debug("Saved %d record(s)", len(entities))
        return [entity.id for entity in entities]

    def load(self, kind: str, record_id: uuid.UUID) -> SQLModel:
        model = model_for(kind)
        with Session(self.engine) as session:
            entity = session.get(model, record_id)
            if entity is None:
                raise RecordNotFoundError(kind, record_id)
            return entity

    def query(self, kind: str, predicate: Callable[[SQLModel], bool] | None = None, **filters) -> list[SQLModel]:
        model = model_for(kind)
        statement = select(model)
        for field_name, value in filters.items():
            column = getattr(model, field_name)
            if isinstance(value, (list, tuple, set, frozenset)):
                statement = statement.where(column.in_(list(value)))
            else:
                statement = statement.where(column == value)
        with Session(self.engine) as session:
            entities = session.exec(statement).all()
        matching = [entity for entity in entities if predicate is None or predicate(entity)]
        return sorted(matching, key=sort_key)


class InMemoryRepository:
    """Keeps serialized copies of records in a dict, callers never share objects with the store"""

    def __init__(self):
        self.records: dict[str, dict[uuid.UUID, dict]] = {kind: {} for kind in RECORD_KINDS}

    def save(self, entity: SQLModel) -> uuid.UUID:
        return self.save_all([entity])[0]

    def save_all(self, entities: Iterable[SQLModel]) -> list[uuid.UUID]:
        entities = list(entities)
        for entity in entities: #check every record before writing any of them
            stored = self.records[kind_of(entity)].get(entity.id)
            if stored is not None and stored["version"] != entity.version:
                raise ConcurrentModificationError(kind_of(entity), entity.id, entity.version, stored["version"])
        for entity in entities:
            entity.version += 1
            self.records[kind_of(entity)][entity.id] = copy.deepcopy(entity.model_dump())
        return [entity.id for entity in entities]

    def load(self, kind: str, record_id: uuid.UUID) -> SQLModel:
        model = model_for(kind)
        data = self.records[kind].get(record_id)
        if data is None:
            raise RecordNotFoundError(kind, record_id)
        return model.model_validate(copy.deepcopy(data))

    def query(self, kind: str, predicate: Callable[[SQLModel], bool] | None = None, **filters) -> list[SQLModel]:
        model = model_for(kind)
        entities = [model.model_validate(copy.deepcopy(data)) for data in self.records[kind].values()]
        matching = [
            entity for entity in entities
            if matches_filters(entity, filters) and (predicate is None or predicate(entity))
        ]
        return sorted(matching, key=sort_key)
