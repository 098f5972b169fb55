"""
Unit tests for the Redis cache repository.

The redis client is replaced by an AsyncMock; no server is required.

Run with: pytest tests/test_storage_unit.py -v
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import RedisError

from trend_radar.storage.interfaces import ConnectionError, StorageError
from trend_radar.storage.redis import RedisCacheRepository


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def repo(client):
    repository = RedisCacheRepository(default_ttl=300)
    repository._client = client
    return repository


@pytest.mark.asyncio
async def test_get_decodes_json(repo, client):
    client.get.return_value = json.dumps({"count": 2}).encode("utf-8")

    assert await repo.get("k") == {"count": 2}
    client.get.assert_awaited_once_with("k")


@pytest.mark.asyncio
async def test_get_missing_key(repo, client):
    client.get.return_value = None
    assert await repo.get("k") is None


@pytest.mark.asyncio
async def test_get_invalid_json_raises_storage_error(repo, client):
    client.get.return_value = b"\x80not json"
    with pytest.raises(StorageError):
        await repo.get("k")


@pytest.mark.asyncio
async def test_get_redis_error_wrapped(repo, client):
    client.get.side_effect = RedisError("down")
    with pytest.raises(StorageError):
        await repo.get("k")


@pytest.mark.asyncio
async def test_set_uses_ttl(repo, client):
    assert await repo.set("k", {"a": 1}, ttl_seconds=60) is True
    client.setex.assert_awaited_once_with("k", 60, b'{"a": 1}')


@pytest.mark.asyncio
async def test_set_defaults_ttl(repo, client):
    await repo.set("k", [1])
    client.setex.assert_awaited_once_with("k", 300, b"[1]")


@pytest.mark.asyncio
async def test_set_without_expiry(repo, client):
    await repo.set("k", "v", ttl_seconds=0)
    client.set.assert_awaited_once_with("k", b'"v"')


@pytest.mark.asyncio
async def test_set_redis_error_wrapped(repo, client):
    client.setex.side_effect = RedisError("read only replica")
    with pytest.raises(StorageError):
        await repo.set("k", {"a": 1})


@pytest.mark.asyncio
async def test_delete(repo, client):
    client.delete.return_value = 1
    assert await repo.delete("k") is True
    client.delete.return_value = 0
    assert await repo.delete("k") is False


def test_client_requires_connect():
    with pytest.raises(StorageError):
        RedisCacheRepository().client


@pytest.mark.asyncio
async def test_connect_failure_raises_connection_error():
    fake_client = AsyncMock()
    fake_client.ping.side_effect = RedisError("connection refused")

    with patch("trend_radar.storage.redis.aioredis.from_url", return_value=fake_client):
        repository = RedisCacheRepository()
        with pytest.raises(ConnectionError):
            await repository.connect()

    fake_client.close.assert_awaited_once()
    with pytest.raises(StorageError):
        repository.client


@pytest.mark.asyncio
async def test_close_releases_client(repo, client):
    await repo.close()

    client.close.assert_awaited_once()
    with pytest.raises(StorageError):
        repo.client


@pytest.mark.asyncio
async def test_connect_passes_socket_timeouts():
    fake_client = AsyncMock()

    with patch(
        "trend_radar.storage.redis.aioredis.from_url", return_value=fake_client
    ) as from_url:
        repository = RedisCacheRepository(socket_timeout=0.5)
        assert await repository.connect() is fake_client

    kwargs = from_url.call_args.kwargs
    assert kwargs["socket_timeout"] == 0.5
    assert kwargs["socket_connect_timeout"] == 0.5
