"""SQLAlchemy plumbing shared by all persistence adapters."""

from qbs.infrastructure.persistence.sqlalchemy.base import Base, TimestampMixin
from qbs.infrastructure.persistence.sqlalchemy.engine import (
    create_database_engine,
    create_session_maker,
    db_timeout,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "create_database_engine",
    "create_session_maker",
    "db_timeout",
]
