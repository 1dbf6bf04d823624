from qbs_identity.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    UserRepositorySQLAlchemy,
)

__all__ = ["UserRepositorySQLAlchemy"]
