"""Unit tests for the cache tier store."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cache.keys import key_generator
from src.cache.manager import (
    CacheManager,
    MemoryCacheStorage,
    RedisCacheStorage,
    create_storage,
)
from src.models.requests import InterceptedRequest
from src.models.responses import ResponseSnapshot

URL = "http://localhost:8000/static/app.js"


def make_response(body: bytes = b"console.log(1)", status: int = 200) -> ResponseSnapshot:
    return ResponseSnapshot(
        status=status,
        status_text="OK",
        headers={"content-type": "application/javascript"},
        body=body,
        url=URL,
    )


class TestMemoryCacheManager:
    """Test suite for CacheManager over the in-memory backend."""

    @pytest.fixture
    def manager(self):
        return CacheManager(MemoryCacheStorage())

    @pytest.mark.asyncio
    async def test_put_then_get(self, manager):
        """Test a stored response can be read back from its partition."""
        request = InterceptedRequest(url=URL)

        assert await manager.put("static-v1", request, make_response()) is True
        cached = await manager.get("static-v1", request)

        assert cached is not None
        assert cached.body == b"console.log(1)"
        assert cached.content_type == "application/javascript"

    @pytest.mark.asyncio
    async def test_get_miss(self, manager):
        """Test get() returns None for unknown requests."""
        assert await manager.get("static-v1", InterceptedRequest(url=URL)) is None

    @pytest.mark.asyncio
    async def test_partitions_created_lazily(self, manager):
        """Test open() alone does not create a partition."""
        handle = manager.open("static-v1")

        assert await manager.list_partitions() == set()

        await handle.put(InterceptedRequest(url=URL), make_response())

        assert await manager.list_partitions() == {"static-v1"}

    @pytest.mark.asyncio
    async def test_put_overwrites(self, manager):
        """Test last writer wins for the same identity."""
        request = InterceptedRequest(url=URL)

        await manager.put("static-v1", request, make_response(b"old"))
        await manager.put("static-v1", request, make_response(b"new"))

        assert (await manager.get("static-v1", request)).body == b"new"

    @pytest.mark.asyncio
    async def test_concurrent_puts(self, manager):
        """Test concurrent puts to different partitions all land."""
        requests = [InterceptedRequest(url=f"{URL}?v={i}") for i in range(20)]

        await asyncio.gather(
            *(
                manager.put(f"p{i % 2}-static-v1", request, make_response(str(i).encode()))
                for i, request in enumerate(requests)
            )
        )

        for i, request in enumerate(requests):
            cached = await manager.get(f"p{i % 2}-static-v1", request)
            assert cached.body == str(i).encode()

    @pytest.mark.asyncio
    async def test_non_get_never_stored(self, manager):
        """Test non-GET requests are neither stored nor looked up."""
        post = InterceptedRequest(method="POST", url=URL, body=b"{}")

        assert await manager.put("static-v1", post, make_response()) is False
        assert await manager.get("static-v1", post) is None
        assert await manager.list_partitions() == set()

    @pytest.mark.asyncio
    async def test_match_searches_all_partitions(self, manager):
        """Test match() finds entries in any partition."""
        request = InterceptedRequest(url="https://fonts.gstatic.com/inter.woff2")
        await manager.put("dynamic-v1", request, make_response(b"font"))

        cached = await manager.match(request)

        assert cached is not None
        assert cached.body == b"font"

    @pytest.mark.asyncio
    async def test_delete_partition(self, manager):
        """Test delete() drops the partition and all its entries."""
        request = InterceptedRequest(url=URL)
        await manager.put("static-v1", request, make_response())

        assert await manager.delete("static-v1") is True
        assert await manager.get("static-v1", request) is None
        assert await manager.list_partitions() == set()

    @pytest.mark.asyncio
    async def test_delete_missing_partition(self, manager):
        """Test deleting an unknown partition returns False."""
        assert await manager.delete("static-v9") is False

    @pytest.mark.asyncio
    async def test_stored_snapshot_is_independent(self, manager):
        """Test a stored snapshot is unaffected by later changes to the original's headers."""
        request = InterceptedRequest(url=URL)
        response = make_response()
        await manager.put("static-v1", request, response)

        response.headers["content-type"] = "text/plain"
        cached = await manager.get("static-v1", request)

        assert cached.content_type == "application/javascript"


class TestCacheManagerFailOpen:
    """Test suite for storage error handling."""

    @pytest.fixture
    def broken_storage(self):
        storage = MagicMock(spec=MemoryCacheStorage)
        storage.read = AsyncMock(side_effect=ConnectionError("storage down"))
        storage.write = AsyncMock(side_effect=ConnectionError("storage down"))
        storage.drop = AsyncMock(side_effect=ConnectionError("storage down"))
        storage.partitions = AsyncMock(side_effect=ConnectionError("storage down"))
        return storage

    @pytest.mark.asyncio
    async def test_get_error_is_miss(self, broken_storage):
        """Test read failures are reported as a miss."""
        manager = CacheManager(broken_storage)

        assert await manager.get("static-v1", InterceptedRequest(url=URL)) is None

    @pytest.mark.asyncio
    async def test_put_error_returns_false(self, broken_storage):
        """Test write failures are swallowed."""
        manager = CacheManager(broken_storage)

        assert await manager.put("static-v1", InterceptedRequest(url=URL), make_response()) is False

    @pytest.mark.asyncio
    async def test_list_and_delete_errors(self, broken_storage):
        """Test enumeration and deletion failures degrade gracefully."""
        manager = CacheManager(broken_storage)

        assert await manager.list_partitions() == set()
        assert await manager.delete("static-v1") is False
        assert await manager.match(InterceptedRequest(url=URL)) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        ["invalid json {", "[]", "42", '"text"', "null", '{"status": "abc"}', '{"body": "abc"}'],
    )
    async def test_corrupt_entry_is_miss(self, raw):
        """Test undecodable or wrongly shaped stored data is treated as a miss."""
        storage = MemoryCacheStorage()
        manager = CacheManager(storage)
        request = InterceptedRequest(url=URL)
        await storage.write("static-v1", key_generator.generate(request.identity), raw)

        assert await manager.get("static-v1", request) is None
        assert await manager.match(request) is None


class TestRedisCacheStorage:
    """Test suite for RedisCacheStorage with a mocked Redis client."""

    @pytest.fixture
    def mock_pipeline(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[1, 1])
        return pipe

    @pytest.fixture
    def mock_redis(self, mock_pipeline):
        mock = AsyncMock()
        mock.hget = AsyncMock(return_value=None)
        mock.smembers = AsyncMock(return_value={"static-v1", "dynamic-v1"})
        mock.pipeline = MagicMock(return_value=mock_pipeline)
        return mock

    @pytest.fixture
    def storage(self, mock_redis):
        connection = MagicMock()
        connection.client = mock_redis
        connection.is_available.return_value = True
        return RedisCacheStorage(connection)

    @pytest.mark.asyncio
    async def test_write_is_transactional(self, storage, mock_redis, mock_pipeline):
        """Test write() runs HSET and SADD in one transaction."""
        await storage.write("static-v1", "req:GET:abc", "{}")

        mock_redis.pipeline.assert_called_once_with(transaction=True)
        mock_pipeline.hset.assert_called_once_with("sw:partition:static-v1", "req:GET:abc", "{}")
        mock_pipeline.sadd.assert_called_once_with("sw:partitions", "static-v1")
        mock_pipeline.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_read(self, storage, mock_redis):
        """Test read() fetches the hash field."""
        mock_redis.hget.return_value = "stored"

        assert await storage.read("static-v1", "req:GET:abc") == "stored"
        mock_redis.hget.assert_awaited_once_with("sw:partition:static-v1", "req:GET:abc")

    @pytest.mark.asyncio
    async def test_drop(self, storage, mock_pipeline):
        """Test drop() deletes the hash and removes it from the index."""
        assert await storage.drop("static-v1") is True
        mock_pipeline.delete.assert_called_once_with("sw:partition:static-v1")
        mock_pipeline.srem.assert_called_once_with("sw:partitions", "static-v1")

    @pytest.mark.asyncio
    async def test_partitions(self, storage):
        """Test partitions() returns the index set."""
        assert await storage.partitions() == {"static-v1", "dynamic-v1"}

    @pytest.mark.asyncio
    async def test_round_trip_through_manager(self, storage, mock_redis, mock_pipeline):
        """Test the manager stores serialized snapshots readable on the way back."""
        manager = CacheManager(storage)
        request = InterceptedRequest(url=URL)

        await manager.put("static-v1", request, make_response(b"\x00\xffbinary"))
        stored = mock_pipeline.hset.call_args[0][2]
        mock_redis.hget.return_value = stored

        cached = await manager.get("static-v1", request)

        assert cached.body == b"\x00\xffbinary"
        assert cached.status == 200

    @pytest.mark.asyncio
    async def test_no_client_is_miss(self):
        """Test a missing Redis client degrades to misses through the manager."""
        connection = MagicMock()
        connection.client = None
        manager = CacheManager(RedisCacheStorage(connection))

        assert await manager.get("static-v1", InterceptedRequest(url=URL)) is None
        assert await manager.put("static-v1", InterceptedRequest(url=URL), make_response()) is False


class TestCreateStorage:
    """Test suite for backend selection."""

    def test_memory_backend(self):
        assert isinstance(create_storage("memory"), MemoryCacheStorage)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_storage("sqlite")
