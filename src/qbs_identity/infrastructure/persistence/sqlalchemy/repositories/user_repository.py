"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from qbs.domain.shared.time import as_utc
from qbs.infrastructure.persistence.sqlalchemy.engine import db_timeout
from qbs_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    GoogleAccountAlreadyLinkedError,
    User,
    UserRepository,
)
from qbs_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface.

    Every statement runs under the configured timeout; an outage surfaces
    as ServiceUnavailableError.
    """

    def __init__(self, session: AsyncSession, timeout: float | None = None) -> None:
        self._session = session
        self._timeout = timeout

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)
        return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value
        stmt = select(UserModel).where(UserModel.email == email_value)
        return await self._find_one(stmt)

    async def find_by_google_id(self, google_id: str) -> User | None:
        stmt = select(UserModel).where(UserModel.google_id == google_id)
        return await self._find_one(stmt)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            async with db_timeout(self._timeout):
                if existing:
                    self._update_model(existing, user)
                    logger.debug("Updated user: %s", user.id)
                else:
                    self._session.add(self._map_to_model(user))
                    logger.info("Created user: %s", user.id)

                await self._session.flush()
        except IntegrityError as e:
            await self._session.rollback()
            if "google_id" in str(e.orig).lower() and user.google_id:
                raise GoogleAccountAlreadyLinkedError(user.google_id) from e
            if "unique" in str(e).lower() or "duplicate" in str(e).lower():
                raise EmailAlreadyExistsError(user.email) from e
            raise

    async def delete(self, user_id: UUID) -> None:
        model = await self._find_model_by_id(user_id)

        if model:
            async with db_timeout(self._timeout):
                await self._session.delete(model)
                await self._session.flush()
            logger.info("Deleted user: %s", user_id)

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        async with db_timeout(self._timeout):
            result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _find_one(self, stmt) -> User | None:
        async with db_timeout(self._timeout):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        async with db_timeout(self._timeout):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            password_hash=model.password_hash,
            google_id=model.google_id,
            country=model.country,
            is_email_verified=model.is_email_verified,
            verification_token=model.verification_token,
            token_version=model.token_version,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            last_login_at=(
                as_utc(model.last_login_at) if model.last_login_at else None
            ),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            password_hash=user.password_hash,
            google_id=user.google_id,
            country=user.country,
            is_email_verified=user.is_email_verified,
            verification_token=user.verification_token,
            token_version=user.token_version,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login_at=user.last_login_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.password_hash = user.password_hash
        model.google_id = user.google_id
        model.country = user.country
        model.is_email_verified = user.is_email_verified
        model.verification_token = user.verification_token
        model.token_version = user.token_version
        model.updated_at = user.updated_at
        model.last_login_at = user.last_login_at
