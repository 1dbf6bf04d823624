"""Unit tests for the revocation stores."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from qbs.domain.shared.exceptions import ServiceUnavailableError
from qbs_auth import InMemoryRevocationStore, RedisRevocationStore
from qbs_auth.revocation.redis_store import KEY_PREFIX


class TestInMemoryRevocationStore:
    """Tests for the process-local store."""

    def setup_method(self):
        self.store = InMemoryRevocationStore()

    @pytest.mark.asyncio
    async def test_add_and_contains(self):
        await self.store.add("abc", ttl_seconds=60)

        assert await self.store.contains("abc")
        assert not await self.store.contains("other")

    @pytest.mark.asyncio
    async def test_entry_expires_with_token(self):
        await self.store.add("abc", ttl_seconds=0)
        await asyncio.sleep(0.01)

        assert not await self.store.contains("abc")

    @pytest.mark.asyncio
    async def test_expired_entries_are_pruned_on_insert(self):
        await self.store.add("old", ttl_seconds=0)
        await asyncio.sleep(0.01)

        await self.store.add("new", ttl_seconds=60)

        assert len(self.store) == 1

    @pytest.mark.asyncio
    async def test_concurrent_inserts_are_all_recorded(self):
        await asyncio.gather(
            *(self.store.add(f"jti-{i}", ttl_seconds=60) for i in range(200)),
        )

        assert len(self.store) == 200


class TestRedisRevocationStore:
    """Tests for the Redis-backed store with a mocked client."""

    def setup_method(self):
        self.client = AsyncMock()
        self.store = RedisRevocationStore(self.client)

    @pytest.mark.asyncio
    async def test_add_sets_key_with_ttl(self):
        await self.store.add("abc", ttl_seconds=120)

        self.client.set.assert_awaited_once_with(f"{KEY_PREFIX}abc", "1", ex=120)

    @pytest.mark.asyncio
    async def test_add_skips_non_positive_ttl(self):
        await self.store.add("abc", ttl_seconds=0)

        self.client.set.assert_not_called()

    @pytest.mark.asyncio
    async def test_contains_checks_key(self):
        self.client.exists.return_value = 1

        assert await self.store.contains("abc")
        self.client.exists.assert_awaited_once_with(f"{KEY_PREFIX}abc")

    @pytest.mark.asyncio
    async def test_contains_fails_closed_when_redis_is_down(self):
        self.client.exists.side_effect = RedisConnectionError("down")

        assert await self.store.contains("abc") is True

    @pytest.mark.asyncio
    async def test_add_surfaces_outage_as_service_unavailable(self):
        self.client.set.side_effect = RedisConnectionError("down")

        with pytest.raises(ServiceUnavailableError):
            await self.store.add("abc", ttl_seconds=60)

    @pytest.mark.asyncio
    async def test_close_closes_client(self):
        await self.store.close()

        self.client.aclose.assert_awaited_once()
