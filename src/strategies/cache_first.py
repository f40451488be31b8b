"""
Cache-first strategy with background revalidation.

Used for the application shell and static assets: a cached copy is
returned immediately and refreshed in a detached task for the next
request. Misses go to the network; when that fails too, documents get
the offline page and everything else a 503.
"""

from src.cache.keys import PartitionName
from src.cache.manager import CacheManager
from src.cache.versions import CacheVersionManager
from src.fallback import generic_unavailable, html_offline_page
from src.models.requests import InterceptedRequest, RequestDestination
from src.network.client import NetworkClient
from src.network.exceptions import NetworkError
from src.strategies.base import ResponseSource, StrategyResult
from src.utils.logger import get_logger
from src.utils.tasks import TaskScheduler

logger = get_logger(__name__)


class CacheFirstExecutor:
    """
    Executor for the cache-first-with-background-revalidate strategy.

    Attributes:
        cache: Cache tier
        versions: Current partition names
        network: Network client
        scheduler: Scheduler running detached revalidation tasks
        origin: Origin of the host application (same-origin responses
            are stored in the static partition, others in dynamic)
    """

    def __init__(
        self,
        cache: CacheManager,
        versions: CacheVersionManager,
        network: NetworkClient,
        scheduler: TaskScheduler,
        origin: str,
    ) -> None:
        self.cache = cache
        self.versions = versions
        self.network = network
        self.scheduler = scheduler
        self.origin = origin

    def target_partition(self, request: InterceptedRequest) -> PartitionName:
        if request.is_same_origin(self.origin):
            return self.versions.static
        return self.versions.dynamic

    async def execute(self, request: InterceptedRequest) -> StrategyResult:
        cached = await self.cache.match(request)

        if cached is not None:
            self.scheduler.spawn(
                self.revalidate(request),
                name=f"revalidate:{request.url}",
            )
            return StrategyResult(cached, ResponseSource.CACHE)

        try:
            response = await self.network.fetch(request)

        except NetworkError as e:
            logger.info(
                "cache_first_fetch_failed",
                url=request.url,
                destination=request.destination.value,
                error=str(e),
            )
            if request.destination == RequestDestination.DOCUMENT:
                return StrategyResult(html_offline_page(), ResponseSource.FALLBACK)
            return StrategyResult(generic_unavailable(), ResponseSource.FALLBACK)

        if response.ok:
            await self.cache.put(self.target_partition(request), request, response.clone())

        return StrategyResult(response, ResponseSource.NETWORK)

    async def revalidate(self, request: InterceptedRequest) -> bool:
        """
        Refresh the cached entry for a request from the network.

        Network failures are swallowed; the cached copy stays as it is.

        Returns:
            True if the cache entry was overwritten
        """
        try:
            response = await self.network.fetch(request)

        except NetworkError as e:
            logger.debug("background_revalidate_failed", url=request.url, error=str(e))
            return False

        if not response.ok:
            logger.debug(
                "background_revalidate_skipped",
                url=request.url,
                status=response.status,
            )
            return False

        stored = await self.cache.put(self.target_partition(request), request, response.clone())
        logger.debug("background_revalidate_complete", url=request.url, stored=stored)
        return stored
