"""In-memory revocation store."""

import logging
import threading
import time

from qbs_auth.revocation.base import RevocationStore

logger = logging.getLogger(__name__)


class InMemoryRevocationStore(RevocationStore):
    """Revocation set held in process memory.

    Safe under concurrent logouts. Entries are pruned once the revoked
    token would have expired anyway. State is lost on restart and is not
    shared between instances; use RedisRevocationStore for that.
    """

    def __init__(self) -> None:
        self._entries: dict[str, float] = {}
        self._lock = threading.Lock()

    async def add(self, jti: str, ttl_seconds: int) -> None:
        now = time.monotonic()
        with self._lock:
            self._prune(now)
            self._entries[jti] = now + max(ttl_seconds, 0)
        logger.debug("Revoked token %s (ttl=%ss)", jti, ttl_seconds)

    async def contains(self, jti: str) -> bool:
        with self._lock:
            expires_at = self._entries.get(jti)
        if expires_at is None:
            return False
        return time.monotonic() <= expires_at

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune(self, now: float) -> None:
        expired = [jti for jti, expires_at in self._entries.items() if expires_at < now]
        for jti in expired:
            del self._entries[jti]
