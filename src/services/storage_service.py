"""
Storage Service - generic record access for the import engine.

StorageAccessor wraps one SQLAlchemy session and exposes the small CRUD
surface the import engine needs, addressed by RecordKind rather than by
model class. Records go in and come out as plain dictionaries.

Usage:
    from src.services.database import session_scope
    from src.services.storage_service import StorageAccessor

    with session_scope() as session:
        storage = StorageAccessor(session)
        clients = storage.select_all(RecordKind.CLIENTS)
        storage.insert(RecordKind.CLIENTS, {"ragione_sociale": "Acme Srl"})
"""

from typing import Any, Dict, List, Optional, Set, Type

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.models import MODELS_BY_KIND, BaseModel, RecordKind
from src.services.exceptions import RowWriteFailure
from src.services.import_config import parse_record_kind

Record = Dict[str, Any]


def get_model(kind) -> Type[BaseModel]:
    """Return the ORM model class storing records of a kind."""
    return MODELS_BY_KIND[parse_record_kind(kind)]


def _describe_write_error(error: SQLAlchemyError) -> str:
    if isinstance(error, IntegrityError):
        detail = str(getattr(error, "orig", None) or error)
        return f"constraint violation ({detail})"
    return str(error).splitlines()[0]


class StorageAccessor:
    """
    Kind-addressed CRUD over a SQLAlchemy session.

    insert() and update_by_id() flush immediately so constraint
    violations surface per row. On failure of a write or of commit() the
    session is rolled back (discarding only uncommitted work) and
    RowWriteFailure is raised; callers commit after every successful
    write they want to keep.
    """

    def __init__(self, session: Session):
        self.session = session

    def select_all(self, kind) -> List[Record]:
        """Fetch every stored record of a kind as dictionaries, oldest first."""
        model = get_model(kind)
        rows = self.session.query(model).order_by(model.created_at, model.id).all()
        return [row.to_dict() for row in rows]

    def select_identifiers(self, kind) -> Set[str]:
        """Fetch only the identifier column of a kind."""
        model = get_model(kind)
        return {row_id for (row_id,) in self.session.query(model.id).all()}

    def select_by_field(
        self, kind, field: str, value: Any, limit: Optional[int] = None
    ) -> List[Record]:
        """
        Fetch the records of a kind whose field equals a value, oldest first.

        Args:
            kind: RecordKind (or table name) to search
            field: Column name to filter on
            value: Exact value to match
            limit: Maximum number of records to return (None for all)

        Returns:
            Matching records as dictionaries (empty if nothing matches)

        Raises:
            ValueError: If the kind's model has no such column
        """
        model = get_model(kind)
        if field not in model.__table__.columns:
            raise ValueError(f"{model.__tablename__} has no column '{field}'")
        query = (
            self.session.query(model)
            .filter(getattr(model, field) == value)
            .order_by(model.created_at, model.id)
        )
        if limit is not None:
            query = query.limit(limit)
        return [row.to_dict() for row in query.all()]

    def insert(self, kind, record: Record) -> Record:
        """
        Insert a new record.

        Args:
            kind: RecordKind (or table name) to insert into
            record: Column values; unknown keys are ignored

        Returns:
            The stored record as a dictionary (including its new id)

        Raises:
            RowWriteFailure: If storage rejects the row
        """
        model = get_model(kind)
        columns = model.__table__.columns
        values = {key: value for key, value in record.items() if key in columns}
        instance = model(**values)
        try:
            self.session.add(instance)
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RowWriteFailure(model.__tablename__, _describe_write_error(e), e) from e
        return instance.to_dict()

    def update_by_id(self, kind, record_id: str, record: Record) -> Record:
        """
        Update an existing record by identifier.

        Only keys present in the record are written; absent keys keep
        their stored values.

        Raises:
            RowWriteFailure: If the record does not exist or storage rejects the update
        """
        model = get_model(kind)
        instance = self.session.get(model, record_id)
        if instance is None:
            raise RowWriteFailure(model.__tablename__, f"no record with id '{record_id}'")
        try:
            instance.update_from_dict(record)
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RowWriteFailure(model.__tablename__, _describe_write_error(e), e) from e
        return instance.to_dict()

    def commit(self, kind) -> None:
        """
        Commit work done so far in the session.

        Raises:
            RowWriteFailure: If the commit is rejected; the session is rolled back
        """
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RowWriteFailure(get_model(kind).__tablename__, _describe_write_error(e), e) from e

    def rollback(self) -> None:
        """Discard uncommitted work in the session."""
        self.session.rollback()
