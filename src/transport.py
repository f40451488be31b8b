"""
httpx transport that routes a host application's requests through the worker.

Example:
    >>> worker = create_worker(WorkerSettings.from_env())
    >>> async with httpx.AsyncClient(transport=OfflineCacheTransport(worker)) as client:
    ...     response = await client.get("https://api.jsonbin.io/v3/b/123")
"""
from typing import Optional

import httpx

from src.models.requests import InterceptedRequest
from src.utils.logger import get_logger
from src.worker import ServiceWorker

logger = get_logger(__name__)


class OfflineCacheTransport(httpx.AsyncBaseTransport):
    """
    Intercepting transport.

    GET requests are answered by the worker (network, cache or
    fallback). Requests the worker does not intercept are forwarded to
    the pass-through transport unmodified.
    """

    def __init__(
        self,
        worker: ServiceWorker,
        passthrough: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.worker = worker
        self.passthrough = passthrough or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        intercepted = InterceptedRequest.from_httpx(request)

        snapshot = await self.worker.handle(intercepted)
        if snapshot is None:
            logger.debug("transport_passthrough", method=request.method, url=str(request.url))
            return await self.passthrough.handle_async_request(request)

        return snapshot.to_httpx(request)

    async def aclose(self) -> None:
        await self.passthrough.aclose()
