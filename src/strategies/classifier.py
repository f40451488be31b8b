"""
Strategy selection for intercepted requests.

Classification is a pure function of the request method and URL:
non-GET requests are ignored, data-API requests go network-first and
everything else is served cache-first with background revalidation.
"""
from enum import Enum

from src.models.requests import InterceptedRequest


class Strategy(str, Enum):
    """Caching strategy applied to a request."""

    IGNORED = "ignored"
    NETWORK_FIRST = "network_first"
    CACHE_FIRST_REVALIDATE = "cache_first_revalidate"


class StrategyClassifier:
    """
    Selects the caching strategy for a request.

    Attributes:
        api_host_pattern: URL substring marking remote-data-API requests

    Example:
        >>> classifier = StrategyClassifier("api.jsonbin.io")
        >>> classifier.classify(InterceptedRequest(url="https://api.jsonbin.io/v3/b/1"))
        <Strategy.NETWORK_FIRST: 'network_first'>
    """

    def __init__(self, api_host_pattern: str) -> None:
        if not api_host_pattern:
            raise ValueError("api_host_pattern must not be empty")
        self.api_host_pattern = api_host_pattern

    def is_api_request(self, request: InterceptedRequest) -> bool:
        return self.api_host_pattern in request.url

    def classify(self, request: InterceptedRequest) -> Strategy:
        """
        Classify a request.

        Args:
            request: Intercepted request

        Returns:
            IGNORED for non-GET requests, NETWORK_FIRST for data-API
            requests, CACHE_FIRST_REVALIDATE otherwise
        """
        if not request.is_read:
            return Strategy.IGNORED
        if self.is_api_request(request):
            return Strategy.NETWORK_FIRST
        return Strategy.CACHE_FIRST_REVALIDATE
