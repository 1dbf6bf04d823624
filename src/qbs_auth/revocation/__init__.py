"""Token revocation stores."""

from qbs_auth.revocation.base import RevocationStore
from qbs_auth.revocation.memory_store import InMemoryRevocationStore
from qbs_auth.revocation.redis_store import RedisRevocationStore

__all__ = [
    "InMemoryRevocationStore",
    "RedisRevocationStore",
    "RevocationStore",
]
