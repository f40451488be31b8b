"""
Interception worker: wiring and request dispatch.

Builds every component from WorkerSettings and routes intercepted
requests through the strategy classifier to the matching executor.
Also exposes the lifecycle, messaging and notification entry points
the host environment calls.
"""
import time
import traceback
from typing import Any, Optional

from src.cache.manager import CacheManager, create_storage
from src.cache.versions import CacheVersionManager
from src.config import WorkerSettings
from src.fallback import api_offline_placeholder, generic_unavailable, html_offline_page
from src.lifecycle.clients import AppClient, ClientRegistry
from src.lifecycle.controller import LifecycleController
from src.messaging.messenger import CrossContextMessenger
from src.messaging.notifications import Notification, NotificationCenter
from src.models.messages import MessageType
from src.models.requests import InterceptedRequest, RequestDestination
from src.models.responses import HealthCheckResponse, ResponseSnapshot
from src.network.client import NetworkClient
from src.strategies.base import ResponseSource, StrategyResult
from src.strategies.cache_first import CacheFirstExecutor
from src.strategies.classifier import Strategy, StrategyClassifier
from src.strategies.network_first import NetworkFirstExecutor
from src.utils.logger import get_logger, log_request_handled
from src.utils.tasks import TaskScheduler

logger = get_logger(__name__)


class ServiceWorker:
    """
    Offline request-interception cache for the host application.

    Attributes:
        settings: Worker configuration
        cache: Cache tier store
        versions: Current partition generation
        network: Network client
        scheduler: Detached task scheduler (background revalidation)
        clients: Connected application instances
        classifier: Strategy classifier
        lifecycle: Install/activate controller
        messenger: Control message dispatcher
        notifications: Push notification handling

    Example:
        >>> worker = create_worker(WorkerSettings.from_env())
        >>> await worker.install()
        >>> response = await worker.handle(InterceptedRequest(url="https://api.jsonbin.io/v3/b/1"))
    """

    def __init__(
        self,
        settings: WorkerSettings,
        cache: CacheManager,
        network: NetworkClient,
        scheduler: Optional[TaskScheduler] = None,
        clients: Optional[ClientRegistry] = None,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self.network = network
        self.scheduler = scheduler or TaskScheduler()
        self.clients = clients or ClientRegistry()

        self.versions = CacheVersionManager(
            cache,
            generation=settings.cache_generation,
            prefix=settings.cache_prefix,
        )
        self.classifier = StrategyClassifier(settings.api_host_pattern)
        self.network_first = NetworkFirstExecutor(cache, self.versions, network)
        self.cache_first = CacheFirstExecutor(
            cache,
            self.versions,
            network,
            self.scheduler,
            origin=settings.origin,
        )
        self.lifecycle = LifecycleController(
            cache,
            self.versions,
            network,
            self.clients,
            settings.absolute_precache_urls(),
        )
        self.messenger = CrossContextMessenger(
            self.lifecycle, cache, self.versions, self.clients
        )
        self.notifications = NotificationCenter(
            self.clients, settings.resolve(settings.app_entry)
        )

    async def handle(self, request: InterceptedRequest) -> Optional[ResponseSnapshot]:
        """
        Handle an intercepted request.

        Args:
            request: Outbound request from the host application

        Returns:
            Response to hand back, or None when the request is not
            intercepted (non-GET) and must go to the network untouched
        """
        strategy = self.classifier.classify(request)
        if strategy == Strategy.IGNORED:
            logger.debug("request_ignored", method=request.method, url=request.url)
            return None

        start_time = time.time()

        try:
            if strategy == Strategy.NETWORK_FIRST:
                result = await self.network_first.execute(request)
            else:
                result = await self.cache_first.execute(request)

        except Exception as e:
            logger.error(
                "unexpected_error",
                url=request.url,
                strategy=strategy.value,
                error_type=type(e).__name__,
                error_message=str(e),
                traceback=traceback.format_exc(),
            )
            result = StrategyResult(self._last_resort(strategy, request), ResponseSource.FALLBACK)

        log_request_handled(
            strategy=strategy.value,
            source=result.source.value,
            duration_ms=(time.time() - start_time) * 1000,
            url=request.url,
            status=result.response.status,
        )
        return result.response

    def _last_resort(self, strategy: Strategy, request: InterceptedRequest) -> ResponseSnapshot:
        if strategy == Strategy.NETWORK_FIRST:
            return api_offline_placeholder()
        if request.destination == RequestDestination.DOCUMENT:
            return html_offline_page()
        return generic_unavailable()

    async def install(self) -> list[str]:
        """Run installation (and the activation it triggers)."""
        return await self.lifecycle.install()

    async def activate(self) -> list[str]:
        return await self.lifecycle.activate()

    async def handle_message(self, data: Any) -> Optional[MessageType]:
        return await self.messenger.handle_message(data)

    async def handle_sync(self, tag: str) -> int:
        return await self.messenger.handle_sync(tag)

    def handle_push(self, payload: Optional[bytes | str] = None) -> Notification:
        return self.notifications.handle_push(payload)

    def handle_notification_click(
        self, notification: Notification, action: str = ""
    ) -> Optional[AppClient]:
        return self.notifications.handle_click(notification, action)

    async def health(self) -> HealthCheckResponse:
        """
        Report lifecycle state and component health.

        Returns:
            HealthCheckResponse with status healthy, degraded or unhealthy
        """
        storage_ok = await self.cache.storage.ping()
        partitions = sorted(await self.cache.list_partitions())

        components = {
            "storage": "healthy" if storage_ok else "unhealthy",
            "lifecycle": "healthy" if self.lifecycle.is_active else "degraded",
        }

        if all(status == "healthy" for status in components.values()):
            overall_status = "healthy"
        elif any(status == "unhealthy" for status in components.values()):
            overall_status = "unhealthy"
        else:
            overall_status = "degraded"

        response = HealthCheckResponse(
            status=overall_status,
            state=self.lifecycle.state.value,
            generation=self.versions.generation,
            partitions=partitions,
            components=components,
        )

        logger.debug("health_check_performed", status=overall_status)
        return response

    async def close(self) -> None:
        """Wait for background work, then release network and storage."""
        await self.scheduler.drain()
        await self.network.close()
        await self.cache.close()
        logger.info("worker_closed")


def create_worker(
    settings: WorkerSettings,
    network: Optional[NetworkClient] = None,
) -> ServiceWorker:
    """
    Create a worker with the storage backend named in settings.

    Args:
        settings: Worker configuration
        network: Optional network client (a new one is created otherwise)

    Returns:
        Configured ServiceWorker
    """
    storage = create_storage(
        settings.cache_backend,
        settings.redis_url,
        socket_timeout=settings.network_timeout_seconds,
    )
    worker = ServiceWorker(
        settings,
        CacheManager(storage),
        network or NetworkClient(timeout_seconds=settings.network_timeout_seconds),
    )

    logger.info(
        "worker_created",
        origin=settings.origin,
        backend=settings.cache_backend,
        partitions=worker.versions.describe(),
        api_host_pattern=settings.api_host_pattern,
    )
    return worker
