"""
Registry of connected application instances.

Each open instance of the host application is a client. The worker
posts messages to clients, takes control of them on activation and
opens new ones for notification clicks.
"""
import itertools
from typing import Any, Callable, Dict, List, Optional

from src.utils.logger import get_logger

logger = get_logger(__name__)

MessageSink = Callable[[Dict[str, Any]], None]


class AppClient:
    """
    One connected application instance.

    Attributes:
        id: Registry-assigned identifier
        url: URL the instance has open
        controlled: Whether this worker serves its requests
        messages: Messages delivered when no sink was supplied
    """

    def __init__(
        self,
        client_id: str,
        url: str,
        sink: Optional[MessageSink] = None,
        controlled: bool = False,
    ) -> None:
        self.id = client_id
        self.url = url
        self.controlled = controlled
        self.messages: List[Dict[str, Any]] = []
        self._sink = sink

    def post_message(self, message: Dict[str, Any]) -> None:
        if self._sink is not None:
            self._sink(message)
        else:
            self.messages.append(message)

    def __repr__(self) -> str:
        return f"AppClient(id={self.id!r}, url={self.url!r}, controlled={self.controlled})"


class ClientRegistry:
    """
    Tracks connected application instances.

    Example:
        >>> registry = ClientRegistry()
        >>> client = registry.connect("http://localhost:8000/Anki%20Dashboard.html")
        >>> registry.claim()
        1
        >>> registry.match_all() == [client]
        True
    """

    def __init__(self) -> None:
        self._clients: Dict[str, AppClient] = {}
        self._ids = itertools.count(1)

    def connect(
        self,
        url: str,
        sink: Optional[MessageSink] = None,
        controlled: bool = False,
    ) -> AppClient:
        client = AppClient(f"client-{next(self._ids)}", url, sink, controlled)
        self._clients[client.id] = client
        logger.debug("client_connected", client_id=client.id, url=url)
        return client

    def disconnect(self, client_id: str) -> bool:
        removed = self._clients.pop(client_id, None) is not None
        logger.debug("client_disconnected", client_id=client_id, removed=removed)
        return removed

    def get(self, client_id: str) -> Optional[AppClient]:
        return self._clients.get(client_id)

    def match_all(self, include_uncontrolled: bool = False) -> List[AppClient]:
        """
        List connected clients.

        Args:
            include_uncontrolled: Also return clients this worker does
                not control yet

        Returns:
            Clients in connection order
        """
        return [
            client
            for client in self._clients.values()
            if include_uncontrolled or client.controlled
        ]

    def claim(self) -> int:
        """
        Take control of every connected client.

        Returns:
            Number of clients newly brought under control
        """
        claimed = 0
        for client in self._clients.values():
            if not client.controlled:
                client.controlled = True
                claimed += 1
        logger.info("clients_claimed", claimed=claimed, total=len(self._clients))
        return claimed

    def open_window(self, url: str) -> AppClient:
        """Open a new application instance controlled by this worker."""
        client = self.connect(url, controlled=True)
        logger.info("client_window_opened", client_id=client.id, url=url)
        return client
