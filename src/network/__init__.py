"""
Network access layer using httpx.

Example:
    >>> from src.network import NetworkClient, NetworkError
    >>> client = NetworkClient(timeout_seconds=10)
"""

from src.network.client import NetworkClient
from src.network.exceptions import (
    ConnectError,
    NetworkError,
    StorageError,
    TimeoutError,
)

__all__ = [
    "NetworkClient",
    # Exceptions
    "NetworkError",
    "ConnectError",
    "TimeoutError",
    "StorageError",
]
