"""
Custom exceptions for network and storage failures.

This module defines the hierarchy of errors the interception engine
distinguishes. Network errors mean no response could be obtained at
all; an HTTP response with a non-200 status is not an error.
"""

from typing import Optional


class NetworkError(Exception):
    """
    Base exception for failed network fetches.

    Raised when the request could not be completed (DNS failure,
    refused connection, timeout). Executors catch this to move on to
    cache lookups and fallbacks.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """
        Initialize NetworkError.

        Args:
            message: Error description
            url: URL that failed
            status_code: Optional HTTP status code
        """
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} ({self.url})"
        return self.message


class ConnectError(NetworkError):
    """
    Raised when a connection to the remote host cannot be established.

    Example:
        >>> raise ConnectError("Connection refused", url="https://cdn.tailwindcss.com")
    """

    def __init__(self, message: str = "Connection failed", url: Optional[str] = None) -> None:
        super().__init__(message, url=url)


class TimeoutError(NetworkError):
    """
    Raised when a network fetch exceeds the configured timeout.

    Example:
        >>> raise TimeoutError(url="https://api.jsonbin.io/v3/b/1", timeout_seconds=30)
    """

    def __init__(
        self,
        message: str = "Network request timed out",
        url: Optional[str] = None,
        timeout_seconds: float = 30,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{message} ({timeout_seconds}s)", url=url, status_code=408)


class StorageError(Exception):
    """
    Raised by storage backends when a partition operation fails.

    The cache manager converts these into misses; they never reach the
    requester.
    """

    def __init__(self, message: str, partition: Optional[str] = None) -> None:
        self.message = message
        self.partition = partition
        super().__init__(message)
