"""Cache tier for intercepted HTTP responses.

This package provides partitioned response caching with:
- Connection pooling for the durable backend (PartitionStoreConnection)
- Storage backends (RedisCacheStorage, MemoryCacheStorage)
- Partition naming and key generation (PartitionName, CacheKeyGenerator)
- Cache operations (CacheManager)
- Generation tracking and reclamation (CacheVersionManager)
- Graceful fail-open behavior
"""

from src.cache.connection import PartitionStoreConnection
from src.cache.keys import CacheKeyGenerator, CacheRole, PartitionName, key_generator
from src.cache.manager import (
    CacheManager,
    CachePartition,
    CacheStorage,
    MemoryCacheStorage,
    RedisCacheStorage,
    create_storage,
)
from src.cache.versions import CacheVersionManager

__all__ = [
    # Connection
    "PartitionStoreConnection",
    # Key generation
    "CacheKeyGenerator",
    "CacheRole",
    "PartitionName",
    "key_generator",
    # Storage
    "CacheStorage",
    "MemoryCacheStorage",
    "RedisCacheStorage",
    "create_storage",
    # Cache manager
    "CacheManager",
    "CachePartition",
    # Versions
    "CacheVersionManager",
]
