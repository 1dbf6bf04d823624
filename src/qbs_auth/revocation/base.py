"""Revocation store interface."""

from abc import ABC, abstractmethod


class RevocationStore(ABC):
    """Process- or cluster-wide set of revoked token ids.

    Entries only need to live as long as the token they revoke: once a
    token has expired it fails verification on its own.
    """

    @abstractmethod
    async def add(self, jti: str, ttl_seconds: int) -> None:
        """Revoke a token id for the given number of seconds. Idempotent."""

    @abstractmethod
    async def contains(self, jti: str) -> bool:
        """Check whether a token id has been revoked."""

    async def close(self) -> None:
        """Release any underlying connections."""
