"""
Messaging between the worker, the host application and the OS.
"""

from src.messaging.messenger import BACKGROUND_SYNC_TAG, CrossContextMessenger
from src.messaging.notifications import (
    Notification,
    NotificationCenter,
    build_notification_options,
)

__all__ = [
    "BACKGROUND_SYNC_TAG",
    "CrossContextMessenger",
    "Notification",
    "NotificationCenter",
    "build_notification_options",
]
