"""
Control messages between the worker and the host application.

Handles inbound messages (SKIP_WAITING, CACHE_UPDATE) and the periodic
background-sync trigger, which notifies every connected client with a
BACKGROUND_SYNC_COMPLETE message.
"""
from typing import Any, Optional

from pydantic import ValidationError

from src.cache.manager import CacheManager
from src.cache.versions import CacheVersionManager
from src.lifecycle.clients import ClientRegistry
from src.lifecycle.controller import LifecycleController
from src.models.messages import BackgroundSyncComplete, ClientMessage, MessageType
from src.utils.logger import get_logger

logger = get_logger(__name__)

BACKGROUND_SYNC_TAG = "background-sync"


class CrossContextMessenger:
    """
    Dispatcher for host-application messages and sync triggers.

    Unknown or malformed messages are logged and ignored; nothing a
    client sends can make the worker fail.

    Example:
        >>> messenger = CrossContextMessenger(lifecycle, cache, versions, clients)
        >>> await messenger.handle_message({"type": "CACHE_UPDATE"})
        <MessageType.CACHE_UPDATE: 'CACHE_UPDATE'>
    """

    def __init__(
        self,
        lifecycle: LifecycleController,
        cache: CacheManager,
        versions: CacheVersionManager,
        clients: ClientRegistry,
    ) -> None:
        self.lifecycle = lifecycle
        self.cache = cache
        self.versions = versions
        self.clients = clients

    async def handle_message(self, data: Any) -> Optional[MessageType]:
        """
        Handle one message from the host application.

        Args:
            data: Message payload, expected to be ``{"type": str, ...}``

        Returns:
            The message type acted on, or None if the message was ignored
        """
        logger.info("message_received", data=data)

        try:
            message = ClientMessage.model_validate(data)
        except ValidationError:
            logger.info("message_ignored", reason="no_type")
            return None

        if message.type == MessageType.SKIP_WAITING.value:
            await self.lifecycle.skip_waiting()
            return MessageType.SKIP_WAITING

        if message.type == MessageType.CACHE_UPDATE.value:
            await self.cache.delete(self.versions.static)
            logger.info("static_cache_cleared", partition=str(self.versions.static))
            return MessageType.CACHE_UPDATE

        logger.info("unknown_message_type", type=message.type)
        return None

    async def handle_sync(self, tag: str) -> int:
        """
        Handle a background-sync trigger.

        Only the ``background-sync`` tag is acted on.

        Returns:
            Number of clients notified
        """
        if tag != BACKGROUND_SYNC_TAG:
            logger.debug("sync_tag_ignored", tag=tag)
            return 0

        logger.info("background_sync_triggered")
        return await self.do_background_sync()

    async def do_background_sync(self) -> int:
        notified = 0
        try:
            message = BackgroundSyncComplete().model_dump()
            for client in self.clients.match_all():
                client.post_message(message)
                notified += 1

        except Exception as e:
            logger.error(
                "background_sync_failed",
                error=str(e),
                error_type=type(e).__name__,
                notified=notified,
            )
            return notified

        logger.info("background_sync_complete", notified=notified)
        return notified
