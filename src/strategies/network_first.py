"""
Network-first strategy for remote-data-API requests.

The network is always tried first so the host application sees fresh
data whenever it is online. Exact-200 responses are kept in the dynamic
partition for use when the network later fails; if it fails with
nothing cached, the offline placeholder dataset is returned.
"""

from src.cache.manager import CacheManager
from src.cache.versions import CacheVersionManager
from src.fallback import api_offline_placeholder
from src.models.requests import InterceptedRequest
from src.network.client import NetworkClient
from src.network.exceptions import NetworkError
from src.strategies.base import ResponseSource, StrategyResult
from src.utils.logger import get_logger

logger = get_logger(__name__)


class NetworkFirstExecutor:
    """
    Executor for the network-first strategy.

    Flow:
        1. Fetch from the network
        2. On exact 200, store a clone in the dynamic partition and
           return the response; other statuses pass through uncached
        3. On network failure, return the dynamic partition's entry
        4. With no entry, return the offline JSON placeholder
    """

    def __init__(
        self,
        cache: CacheManager,
        versions: CacheVersionManager,
        network: NetworkClient,
    ) -> None:
        self.cache = cache
        self.versions = versions
        self.network = network

    async def execute(self, request: InterceptedRequest) -> StrategyResult:
        try:
            response = await self.network.fetch(request)

        except NetworkError as e:
            logger.info(
                "network_first_fetch_failed",
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            cached = await self.cache.get(self.versions.dynamic, request)
            if cached is not None:
                return StrategyResult(cached, ResponseSource.CACHE)

            logger.warning("network_first_no_cache", url=request.url)
            return StrategyResult(api_offline_placeholder(), ResponseSource.FALLBACK)

        if response.ok:
            await self.cache.put(self.versions.dynamic, request, response.clone())
        else:
            logger.debug(
                "network_first_not_cached",
                url=request.url,
                status=response.status,
            )

        return StrategyResult(response, ResponseSource.NETWORK)
