"""Shared fixtures: in-memory cache tier and a scripted network."""

from typing import Dict, List, Tuple, Union

import httpx
import pytest

from src.cache.manager import CacheManager, MemoryCacheStorage
from src.config import WorkerSettings
from src.network.client import NetworkClient
from src.utils.tasks import TaskScheduler
from src.worker import ServiceWorker

ORIGIN = "http://localhost:8000"
API_URL = "https://api.jsonbin.io/v3/b/study-data"
APP_URL = f"{ORIGIN}/Anki%20Dashboard.html"
SCRIPT_URL = f"{ORIGIN}/static/app.js"
FONT_URL = "https://fonts.gstatic.com/s/inter/v12/inter.woff2"

Route = Union[Tuple[int, bytes, str], Exception]


class RouteTable:
    """
    Scripted network for httpx.MockTransport.

    Unknown URLs and URLs marked with fail() raise httpx.ConnectError,
    the way an unreachable host would.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Route] = {}
        self.calls: List[Tuple[str, str]] = []

    def add(
        self,
        url: str,
        status: int = 200,
        body: bytes = b"",
        content_type: str = "text/plain",
    ) -> None:
        self.routes[url] = (status, body, content_type)

    def fail(self, url: str) -> None:
        self.routes[url] = httpx.ConnectError("network unreachable")

    def called(self, url: str) -> int:
        return sum(1 for _, called_url in self.calls if called_url == url)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append((request.method, url))

        route = self.routes.get(url)
        if route is None:
            raise httpx.ConnectError("network unreachable", request=request)
        if isinstance(route, Exception):
            raise route

        status, body, content_type = route
        return httpx.Response(status, content=body, headers={"content-type": content_type})


@pytest.fixture
def routes():
    return RouteTable()


@pytest.fixture
def network(routes):
    return NetworkClient(timeout_seconds=5, transport=httpx.MockTransport(routes.handler))


@pytest.fixture
def storage():
    return MemoryCacheStorage()


@pytest.fixture
def cache(storage):
    return CacheManager(storage)


@pytest.fixture
def scheduler():
    return TaskScheduler()


@pytest.fixture
def settings():
    return WorkerSettings(
        origin=ORIGIN,
        cache_backend="memory",
        precache_urls=["./Anki Dashboard.html", "./manifest.json", FONT_URL],
    )


@pytest.fixture
def worker(settings, cache, network, scheduler):
    return ServiceWorker(settings, cache, network, scheduler=scheduler)
