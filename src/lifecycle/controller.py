"""
Worker lifecycle: install, wait, activate.

Install pre-populates the static partition with the application shell;
activation reclaims partitions of earlier generations and takes control
of already-open application instances. The worker never lingers in the
waiting state: install always asks to skip it.
"""
import asyncio
from enum import Enum
from typing import List

from src.cache.manager import CacheManager
from src.cache.versions import CacheVersionManager
from src.lifecycle.clients import ClientRegistry
from src.models.requests import InterceptedRequest
from src.network.client import NetworkClient
from src.utils.logger import get_logger

logger = get_logger(__name__)


class WorkerState(str, Enum):
    """Lifecycle states of the worker."""

    INSTALLING = "installing"
    WAITING = "waiting"
    ACTIVE = "active"


class LifecycleController:
    """
    Drives the installing -> waiting -> active state machine.

    Attributes:
        state: Current lifecycle state
        precache_urls: Absolute URLs fetched into the static partition
        reclaimed: Partitions deleted by the last activation

    Example:
        >>> controller = LifecycleController(cache, versions, network, clients, urls)
        >>> await controller.install()   # pre-populates, then activates
        >>> controller.state
        <WorkerState.ACTIVE: 'active'>
    """

    def __init__(
        self,
        cache: CacheManager,
        versions: CacheVersionManager,
        network: NetworkClient,
        clients: ClientRegistry,
        precache_urls: List[str],
    ) -> None:
        self.cache = cache
        self.versions = versions
        self.network = network
        self.clients = clients
        self.precache_urls = list(precache_urls)
        self.state = WorkerState.INSTALLING
        self.reclaimed: List[str] = []
        self._skip_waiting = False

    async def install(self) -> List[str]:
        """
        Pre-populate the static partition and move past waiting.

        Each URL is fetched independently; failures are logged and do
        not abort installation.

        Returns:
            URLs that were cached
        """
        logger.info(
            "worker_installing",
            partition=str(self.versions.static),
            urls=len(self.precache_urls),
        )

        static = self.cache.open(self.versions.static)
        results = await asyncio.gather(
            *(self._precache(static, url) for url in self.precache_urls)
        )
        cached = [url for url, ok in zip(self.precache_urls, results) if ok]

        logger.info(
            "worker_installed",
            cached=len(cached),
            failed=len(self.precache_urls) - len(cached),
        )

        self.state = WorkerState.WAITING
        await self.skip_waiting()
        return cached

    async def _precache(self, partition, url: str) -> bool:
        try:
            request = InterceptedRequest(url=url)
            response = await self.network.fetch(request)

        except Exception as e:
            # Malformed URLs surface outside the httpx error tree
            logger.warning(
                "precache_failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if not response.ok:
            logger.warning("precache_failed", url=url, status=response.status)
            return False

        return await partition.put(request, response)

    async def skip_waiting(self) -> None:
        """
        Activate as soon as installation allows.

        While installing, the request is remembered and honoured when
        install finishes. Once active this is a no-op.
        """
        self._skip_waiting = True

        if self.state == WorkerState.WAITING:
            await self.activate()
        elif self.state == WorkerState.INSTALLING:
            logger.debug("skip_waiting_deferred", state=self.state.value)

    async def activate(self) -> List[str]:
        """
        Reclaim stale partitions and claim open application instances.

        Returns:
            Names of the partitions that were deleted
        """
        if self.state == WorkerState.ACTIVE:
            return []

        logger.info("worker_activating", generation=self.versions.generation)

        self.reclaimed = await self.versions.reclaim()
        self.state = WorkerState.ACTIVE
        self.clients.claim()

        logger.info(
            "worker_activated",
            generation=self.versions.generation,
            reclaimed=self.reclaimed,
        )
        return self.reclaimed

    @property
    def is_active(self) -> bool:
        return self.state == WorkerState.ACTIVE

    @property
    def skip_waiting_requested(self) -> bool:
        return self._skip_waiting
