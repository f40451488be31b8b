"""
Pydantic models for cross-context messages and notification options.

Messages exchanged with the host application are plain dicts on the
wire (``{"type": "...", ...}``); these models validate the inbound
ones and build the outbound ones.
"""
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class MessageType(str, Enum):
    """Message types understood by the worker or sent by it."""

    SKIP_WAITING = "SKIP_WAITING"
    CACHE_UPDATE = "CACHE_UPDATE"
    BACKGROUND_SYNC_COMPLETE = "BACKGROUND_SYNC_COMPLETE"


class ClientMessage(BaseModel):
    """
    Inbound message from the host application.

    Only ``type`` is interpreted; any other keys are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="Message type")


class BackgroundSyncComplete(BaseModel):
    """Completion signal posted to every client after a background sync."""

    type: str = MessageType.BACKGROUND_SYNC_COMPLETE.value
    success: bool = True


class NotificationAction(BaseModel):
    action: str
    title: str
    icon: str


class NotificationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_of_arrival: int = Field(..., alias="dateOfArrival")
    primary_key: str = Field("1", alias="primaryKey")


class NotificationOptions(BaseModel):
    """
    Options passed to the OS notification surface for a push message.

    Serialize with ``model_dump(by_alias=True)`` to get the wire shape.
    """

    body: str
    icon: str = "./icon-192x192.png"
    badge: str = "./icon-72x72.png"
    vibrate: List[int] = Field(default_factory=lambda: [100, 50, 100])
    data: NotificationData
    actions: List[NotificationAction] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
