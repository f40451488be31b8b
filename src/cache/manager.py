"""Cache tier store with fail-open error handling.

This module provides the storage backends for named cache partitions
(Redis for durable storage, in-memory for tests and ephemeral runs) and
the CacheManager that the rest of the engine talks to. Every storage
failure is logged and reported as "entry absent" so request handling
never aborts because of the cache.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Set

import structlog

from src.cache.connection import PartitionStoreConnection
from src.cache.keys import PartitionName, key_generator
from src.models.requests import InterceptedRequest
from src.models.responses import ResponseSnapshot
from src.network.exceptions import StorageError

logger = structlog.get_logger(__name__)


class CacheStorage(ABC):
    """
    Backend holding partitions of key -> serialized snapshot.

    Implementations may raise any exception; CacheManager turns them
    into misses. Each write must be individually atomic and must create
    the partition if it does not exist yet.
    """

    @abstractmethod
    async def read(self, partition: str, key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def write(self, partition: str, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def drop(self, partition: str) -> bool:
        ...

    @abstractmethod
    async def partitions(self) -> Set[str]:
        ...

    def is_available(self) -> bool:
        return True

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MemoryCacheStorage(CacheStorage):
    """
    In-process storage backend.

    Operations never suspend, so each one is atomic with respect to
    other tasks on the event loop.
    """

    def __init__(self) -> None:
        self._partitions: Dict[str, Dict[str, str]] = {}

    async def read(self, partition: str, key: str) -> Optional[str]:
        return self._partitions.get(partition, {}).get(key)

    async def write(self, partition: str, key: str, value: str) -> None:
        self._partitions.setdefault(partition, {})[key] = value

    async def drop(self, partition: str) -> bool:
        return self._partitions.pop(partition, None) is not None

    async def partitions(self) -> Set[str]:
        return set(self._partitions)


class RedisCacheStorage(CacheStorage):
    """
    Durable storage backend on Redis.

    Layout:
        sw:partition:{name}  hash of storage key -> snapshot JSON
        sw:partitions        set of live partition names

    Writes run HSET and SADD in one MULTI/EXEC transaction.
    """

    PARTITION_KEY = "sw:partition:{name}"
    INDEX_KEY = "sw:partitions"

    def __init__(self, connection: PartitionStoreConnection) -> None:
        self.connection = connection

    @property
    def client(self):
        if not self.connection.client:
            raise StorageError("Redis client not available")
        return self.connection.client

    def _hash_key(self, partition: str) -> str:
        return self.PARTITION_KEY.format(name=partition)

    async def read(self, partition: str, key: str) -> Optional[str]:
        return await self.client.hget(self._hash_key(partition), key)

    async def write(self, partition: str, key: str, value: str) -> None:
        pipe = self.client.pipeline(transaction=True)
        pipe.hset(self._hash_key(partition), key, value)
        pipe.sadd(self.INDEX_KEY, partition)
        await pipe.execute()

    async def drop(self, partition: str) -> bool:
        pipe = self.client.pipeline(transaction=True)
        pipe.delete(self._hash_key(partition))
        pipe.srem(self.INDEX_KEY, partition)
        deleted, _ = await pipe.execute()
        return bool(deleted)

    async def partitions(self) -> Set[str]:
        return set(await self.client.smembers(self.INDEX_KEY))

    def is_available(self) -> bool:
        return self.connection.is_available()

    async def ping(self) -> bool:
        return await self.connection.ping()

    async def close(self) -> None:
        await self.connection.close()


class CachePartition:
    """
    Handle on one named partition, as returned by CacheManager.open().

    Example:
        >>> static = manager.open("anki-dashboard-static-v1")
        >>> await static.put(request, response)
        >>> cached = await static.get(request)
    """

    def __init__(self, manager: "CacheManager", name: str) -> None:
        self.manager = manager
        self.name = name

    async def get(self, request: InterceptedRequest) -> Optional[ResponseSnapshot]:
        return await self.manager.get(self.name, request)

    async def put(self, request: InterceptedRequest, response: ResponseSnapshot) -> bool:
        return await self.manager.put(self.name, request, response)

    def __repr__(self) -> str:
        return f"CachePartition({self.name!r})"


class CacheManager:
    """
    Main cache operations manager with fail-open behavior.

    Implements open/get/put/delete/list over named partitions plus a
    cross-partition match(). Only GET requests are ever stored or
    looked up; anything else is a no-op miss.

    Attributes:
        storage: Backend holding the partitions
    """

    def __init__(self, storage: CacheStorage) -> None:
        self.storage = storage

    def open(self, partition: str | PartitionName) -> CachePartition:
        """
        Open a partition handle.

        The partition itself is created lazily on the first put.
        """
        return CachePartition(self, str(partition))

    async def get(
        self, partition: str | PartitionName, request: InterceptedRequest
    ) -> Optional[ResponseSnapshot]:
        """
        Retrieve the cached response for a request from one partition.

        Returns:
            Stored snapshot, or None on miss, non-GET request or storage error
        """
        partition = str(partition)
        if not request.is_read:
            return None

        key = key_generator.generate(request.identity)

        try:
            raw = await self.storage.read(partition, key)

        except Exception as e:
            logger.error(
                "cache_get_error",
                partition=partition,
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if raw is None:
            logger.debug("cache_miss", partition=partition, url=request.url)
            return None

        try:
            snapshot = ResponseSnapshot.from_storage(raw)

        except (ValueError, TypeError, KeyError) as e:
            logger.error(
                "cache_get_decode_error",
                partition=partition,
                url=request.url,
                error=str(e),
            )
            return None

        logger.debug("cache_hit", partition=partition, url=request.url)
        return snapshot

    async def put(
        self,
        partition: str | PartitionName,
        request: InterceptedRequest,
        response: ResponseSnapshot,
    ) -> bool:
        """
        Store a response for a request, overwriting any previous entry.

        Returns:
            True if stored, False for non-GET requests or storage errors
        """
        partition = str(partition)
        if not request.is_read:
            logger.debug("cache_put_skipped", reason="non_get", method=request.method)
            return False

        key = key_generator.generate(request.identity)

        try:
            await self.storage.write(partition, key, response.to_storage())

        except Exception as e:
            logger.error(
                "cache_put_error",
                partition=partition,
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            # Cache write failures never break request handling
            return False

        logger.debug(
            "cache_put",
            partition=partition,
            url=request.url,
            status=response.status,
            size=len(response.body),
        )
        return True

    async def match(self, request: InterceptedRequest) -> Optional[ResponseSnapshot]:
        """
        Look up a request in every live partition.

        Partitions are searched in name order; the first hit wins.
        """
        if not request.is_read:
            return None

        for partition in sorted(await self.list_partitions()):
            cached = await self.get(partition, request)
            if cached is not None:
                return cached
        return None

    async def delete(self, partition: str | PartitionName) -> bool:
        """
        Delete a whole partition.

        Returns:
            True if the partition existed and was deleted
        """
        partition = str(partition)
        try:
            deleted = await self.storage.drop(partition)
            logger.info("partition_deleted", partition=partition, deleted=deleted)
            return deleted

        except Exception as e:
            logger.error(
                "partition_delete_error",
                partition=partition,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def list_partitions(self) -> Set[str]:
        """Enumerate live partition names (empty set on storage error)."""
        try:
            return await self.storage.partitions()

        except Exception as e:
            logger.error(
                "partition_list_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            return set()

    async def close(self) -> None:
        await self.storage.close()


def create_storage(
    backend: str,
    redis_url: Optional[str] = None,
    socket_timeout: float = 5.0,
) -> CacheStorage:
    """
    Build the storage backend named by configuration.

    Args:
        backend: "redis" or "memory"
        redis_url: Redis connection URL for the redis backend
        socket_timeout: Redis socket timeout in seconds

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "redis":
        connection = PartitionStoreConnection(redis_url, socket_timeout=socket_timeout)
        return RedisCacheStorage(connection)
    if backend == "memory":
        return MemoryCacheStorage()
    raise ValueError(f"Unknown cache backend: {backend}")
