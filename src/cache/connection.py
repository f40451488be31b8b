"""Pooled Redis connection for the durable partition store.

The connection never raises on construction or health checks: a store
that cannot reach Redis reports itself unavailable and every partition
operation degrades to a miss.
"""

import os
from typing import Optional
from urllib.parse import urlsplit

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def redact_url(url: str) -> str:
    """Strip credentials from a Redis URL for logging."""
    parts = urlsplit(url)
    if not parts.password and not parts.username:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return parts._replace(netloc=host).geturl()


class PartitionStoreConnection:
    """
    Connection pool shared by every partition of one worker.

    Snapshots are JSON text, so responses are decoded to str. The
    socket timeout follows the worker's network timeout.

    Attributes:
        redis_url: Connection URL in use
        pool: Connection pool, or None if it could not be built
        client: Client bound to the pool, or None
        last_error: Message of the most recent ping failure
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        max_connections: int = 20,
        socket_timeout: float = 5.0,
    ) -> None:
        self.redis_url = redis_url or os.getenv("REDIS_URL", DEFAULT_REDIS_URL)
        self.max_connections = max_connections
        self.socket_timeout = socket_timeout
        self.pool: Optional[ConnectionPool] = None
        self.client: Optional[redis.Redis] = None
        self.last_error: Optional[str] = None
        self._connect()

    def _connect(self) -> None:
        try:
            self.pool = ConnectionPool.from_url(
                self.redis_url,
                max_connections=self.max_connections,
                decode_responses=True,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_timeout,
                retry_on_timeout=True,
            )
            self.client = redis.Redis(connection_pool=self.pool)

        except Exception as e:
            self.pool = None
            self.client = None
            self.last_error = str(e)
            logger.error(
                "partition_store_unavailable",
                redis_url=redact_url(self.redis_url),
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        logger.info(
            "partition_store_connected",
            redis_url=redact_url(self.redis_url),
            max_connections=self.max_connections,
        )

    async def ping(self) -> bool:
        """Round-trip to Redis; records the failure reason in last_error."""
        if self.client is None:
            return False

        try:
            healthy = bool(await self.client.ping())

        except Exception as e:
            self.last_error = str(e)
            logger.warning(
                "partition_store_ping_failed",
                redis_url=redact_url(self.redis_url),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        self.last_error = None
        return healthy

    async def close(self) -> None:
        try:
            if self.client is not None:
                await self.client.aclose()
            if self.pool is not None:
                await self.pool.disconnect()

        except Exception as e:
            logger.error("partition_store_close_failed", error=str(e), error_type=type(e).__name__)

        else:
            logger.info("partition_store_closed")

        finally:
            self.client = None
            self.pool = None

    def is_available(self) -> bool:
        # Pool exists; reachability is ping()'s job
        return self.client is not None
