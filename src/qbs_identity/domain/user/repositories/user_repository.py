"""Port for loading and storing user accounts."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from qbs_identity.domain.user.aggregates.user import User
from qbs_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Persistence port for User aggregates.

    Lookups by email are case-insensitive. Implementations enforce unique
    email and google_id and raise EmailAlreadyExistsError or
    GoogleAccountAlreadyLinkedError when a write would break that.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]: ...

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]: ...

    @abstractmethod
    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        """Account already linked to this Google ``sub``, if any."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool: ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert a new account or write back changes to an existing one."""

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Remove the account. Unknown ids are ignored."""

    @abstractmethod
    async def count(self) -> int: ...
