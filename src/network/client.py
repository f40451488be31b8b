"""
Network client used by the interception engine.

This module wraps an httpx.AsyncClient so every fetch returns an
immutable ResponseSnapshot and every transport failure surfaces as a
NetworkError. Executors never see httpx exceptions.
"""

from typing import Optional

import httpx

from src.models.requests import InterceptedRequest
from src.models.responses import ResponseSnapshot
from src.network.exceptions import ConnectError, NetworkError, TimeoutError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class NetworkClient:
    """
    Async network client producing response snapshots.

    The underlying httpx client is created lazily on first fetch and
    reused until close(). A custom transport can be injected (tests use
    httpx.MockTransport).

    Attributes:
        timeout_seconds: Per-request timeout
        fetch_count: Number of fetches issued (successful or not)

    Example:
        >>> client = NetworkClient(timeout_seconds=10)
        >>> snap = await client.fetch(InterceptedRequest(url="https://example.com/"))
        >>> await client.close()
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.fetch_count = 0
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            )
            logger.debug("network_client_created", timeout=self.timeout_seconds)
        return self._client

    async def fetch(self, request: InterceptedRequest) -> ResponseSnapshot:
        """
        Issue the request to the network.

        Args:
            request: Request to send

        Returns:
            Snapshot of the response, whatever its status code

        Raises:
            ConnectError: If the host could not be reached
            TimeoutError: If the request timed out
            NetworkError: For any other transport failure
        """
        self.fetch_count += 1
        client = self._get_client()

        try:
            response = await client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body or None,
            )

        except httpx.TimeoutException as e:
            logger.warning("network_timeout", url=request.url, error=str(e))
            raise TimeoutError(url=request.url, timeout_seconds=self.timeout_seconds) from e

        except httpx.ConnectError as e:
            logger.warning("network_connect_failed", url=request.url, error=str(e))
            raise ConnectError(str(e) or "Connection failed", url=request.url) from e

        except httpx.HTTPError as e:
            logger.warning(
                "network_fetch_failed",
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NetworkError(f"Network fetch failed: {e}", url=request.url) from e

        except (httpx.InvalidURL, ValueError) as e:
            logger.warning(
                "network_invalid_url",
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NetworkError(f"Invalid URL: {e}", url=request.url) from e

        logger.debug(
            "network_fetch_complete",
            url=request.url,
            method=request.method,
            status=response.status_code,
        )

        return ResponseSnapshot.from_httpx(response, url=request.url)

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("network_client_closed")
