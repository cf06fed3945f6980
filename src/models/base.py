"""
Base model class for all database models.

Provides common functionality and fields for all models:
- Primary key (UUID string, generated on insert)
- Timestamp fields (created_at, updated_at)
- Utility methods (to_dict, update_from_dict)
- SQLAlchemy declarative base
"""

import uuid as uuid_lib
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base, validates

from src.utils.datetime_utils import utc_now

# Create the declarative base for all models
Base = declarative_base()

# Columns never written from imported data
PROTECTED_COLUMNS = ("id", "created_at")


def new_identifier() -> str:
    """Generate a lowercase UUID string for a new record."""
    return str(uuid_lib.uuid4())


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.

    All models inherit from this class to get:
    - id: Primary key (UUID stored as a 36-character string)
    - created_at: Timestamp when record was created
    - updated_at: Timestamp when record was last modified
    - to_dict(): Convert model to dictionary
    """

    __abstract__ = True

    id = Column(String(36), primary_key=True, default=new_identifier)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model instance to dictionary.

        Timestamps are rendered as ISO strings; calendar dates, numbers
        and booleans keep their Python types so they compare directly
        against mapped import records.

        Returns:
            Dictionary representation of the model
        """
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[column.name] = value
        return result

    @validates("id")
    def _validate_id(self, _key: str, value: Any) -> str:
        """Normalize identifiers to lowercase strings."""
        if value is None:
            return value
        return str(value).strip().lower()

    def update_from_dict(self, data: Dict[str, Any]) -> None:
        """
        Update model instance from dictionary.

        Only updates columns present in the dictionary; keys that are
        absent leave the stored value untouched.

        Args:
            data: Dictionary with field names and values
        """
        for column in self.__table__.columns:
            if column.name in data and column.name not in PROTECTED_COLUMNS:
                setattr(self, column.name, data[column.name])

        if "updated_at" not in data:
            self.updated_at = utc_now()

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return f"{class_name}(id={self.id!r})"
