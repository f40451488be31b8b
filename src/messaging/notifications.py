"""
Push notification options and click routing.

The OS notification surface is external; this module only builds the
options passed to it and decides what a click does.
"""
import time
from typing import List, Optional

from src.lifecycle.clients import AppClient, ClientRegistry
from src.models.messages import NotificationAction, NotificationData, NotificationOptions
from src.utils.logger import get_logger

logger = get_logger(__name__)

NOTIFICATION_TITLE = "Anki Dashboard"
DEFAULT_BODY = "Study reminder from Anki Dashboard"
ACTION_ICON = "./icon-192x192.png"


class Notification:
    """A notification shown on the OS surface."""

    def __init__(self, title: str, options: NotificationOptions) -> None:
        self.title = title
        self.options = options
        self.closed = False

    def close(self) -> None:
        self.closed = True


def build_notification_options(
    text: Optional[str] = None,
    now_ms: Optional[int] = None,
) -> NotificationOptions:
    """
    Build options for a push message.

    Args:
        text: Push payload text; the default reminder is used when empty
        now_ms: Arrival time in epoch milliseconds (defaults to now)
    """
    return NotificationOptions(
        body=text or DEFAULT_BODY,
        data=NotificationData(
            date_of_arrival=now_ms if now_ms is not None else int(time.time() * 1000),
            primary_key="1",
        ),
        actions=[
            NotificationAction(action="explore", title="Open Dashboard", icon=ACTION_ICON),
            NotificationAction(action="close", title="Close", icon=ACTION_ICON),
        ],
    )


class NotificationCenter:
    """
    Shows notifications for push messages and routes their clicks.

    Attributes:
        shown: Notifications shown so far
        entry_url: Absolute URL of the application entry document
    """

    def __init__(self, clients: ClientRegistry, entry_url: str) -> None:
        self.clients = clients
        self.entry_url = entry_url
        self.shown: List[Notification] = []

    def handle_push(self, payload: Optional[bytes | str] = None) -> Notification:
        logger.info("push_received", has_payload=bool(payload))

        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")

        notification = Notification(NOTIFICATION_TITLE, build_notification_options(payload))
        self.shown.append(notification)
        return notification

    def handle_click(self, notification: Notification, action: str = "") -> Optional[AppClient]:
        """
        Close the notification and open the dashboard for "explore".

        Returns:
            The opened client, if any
        """
        logger.info("notification_clicked", action=action)
        notification.close()

        if action == "explore":
            return self.clients.open_window(self.entry_url)
        return None
