"""SQLAlchemy persistence for the identity domain."""

from qbs_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from qbs_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = ["UserModel", "UserRepositorySQLAlchemy"]
