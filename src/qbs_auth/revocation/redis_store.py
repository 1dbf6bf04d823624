"""Redis-backed revocation store."""

from __future__ import annotations

import logging

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from qbs.domain.shared.exceptions import ServiceUnavailableError
from qbs_auth.revocation.base import RevocationStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "qbs:revoked:"


class RedisRevocationStore(RevocationStore):
    """Revocation set shared across instances with per-entry TTL.

    Lookups fail closed: if Redis cannot be reached the token is treated
    as revoked.
    """

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisRevocationStore:
        return cls(aioredis.from_url(url, decode_responses=True))

    async def add(self, jti: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        try:
            await self._client.set(f"{KEY_PREFIX}{jti}", "1", ex=ttl_seconds)
        except RedisError as e:
            logger.error("Revocation write failed: %s", e)
            msg = "Token revocation is temporarily unavailable"
            raise ServiceUnavailableError(msg) from e

    async def contains(self, jti: str) -> bool:
        try:
            return bool(await self._client.exists(f"{KEY_PREFIX}{jti}"))
        except RedisError as e:
            logger.error("Revocation lookup failed, treating token as revoked: %s", e)
            return True

    async def close(self) -> None:
        await self._client.aclose()
