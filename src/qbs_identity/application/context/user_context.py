"""User context for request-scoped user identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from qbs_identity.domain.user import User


@dataclass(frozen=True)
class UserContext:
    """Immutable context for the current authenticated user.

    Carries the presented access token so logout and account deletion
    can revoke it.
    """

    user_id: UUID
    email: str
    access_token: str = field(default="", repr=False)

    @classmethod
    def create(cls, user: User, access_token: str = "") -> UserContext:
        return cls(user_id=user.id, email=user.email, access_token=access_token)

    def __str__(self) -> str:
        return f"UserContext({self.email})"
