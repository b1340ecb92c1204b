"""
Declarative base and shared columns for the step store models.

Every table gets an integer primary key, a UUID for references that must
survive an export/import, and created/updated timestamps.
"""

import uuid as uuid_lib
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Abstract parent of Recipe, RecipeStep and StepOutputUse."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    # String rather than a UUID type so SQLite can store it
    uuid = Column(
        String(36), unique=True, nullable=False, default=lambda: str(uuid_lib.uuid4()), index=True
    )
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the row's columns.

        Relationships are not followed. Datetimes become ISO 8601 strings.

        Returns:
            Mapping of column name to value
        """
        data = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            data[column.name] = value.isoformat() if isinstance(value, datetime) else value
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"
