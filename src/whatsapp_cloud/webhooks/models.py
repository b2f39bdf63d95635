"""Webhook data models and event types.

Closed enumerations for notification kinds, message tags, status values
and the event names listeners can subscribe to.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class NotificationKind(str, Enum):
    """Top-level classification of a notification document."""

    MESSAGE = "message"
    STATUS = "status"
    ERRORS = "errors"


class MessageType(str, Enum):
    """Tag of an inbound message."""

    AUDIO = "audio"
    BUTTON = "button"
    CONTACTS = "contacts"
    DOCUMENT = "document"
    IMAGE = "image"
    INTERACTIVE = "interactive"
    LOCATION = "location"
    ORDER = "order"
    REACTION = "reaction"
    STICKER = "sticker"
    SYSTEM = "system"
    TEXT = "text"
    VIDEO = "video"
    UNKNOWN = "unknown"
    UNSUPPORTED = "unsupported"


# Presence-based inference order for messages without a ``type`` field.
INFERRED_MESSAGE_TYPES = (
    MessageType.AUDIO,
    MessageType.BUTTON,
    MessageType.CONTACTS,
    MessageType.DOCUMENT,
    MessageType.IMAGE,
    MessageType.INTERACTIVE,
    MessageType.LOCATION,
    MessageType.ORDER,
    MessageType.REACTION,
    MessageType.STICKER,
    MessageType.SYSTEM,
    MessageType.TEXT,
    MessageType.VIDEO,
)


class StatusValue(str, Enum):
    """Delivery status of an outbound message."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


class WebhookEventType(str, Enum):
    """Event names emitted by the dispatcher.

    Failed statuses are emitted as ``errors``; there is no ``failed`` event.
    """

    # Message events
    AUDIO = "audio"
    BUTTON = "button"
    CONTACTS = "contacts"
    DOCUMENT = "document"
    IMAGE = "image"
    INTERACTIVE = "interactive"
    LOCATION = "location"
    ORDER = "order"
    REACTION = "reaction"
    STICKER = "sticker"
    SYSTEM = "system"
    TEXT = "text"
    VIDEO = "video"
    UNKNOWN = "unknown"
    UNSUPPORTED = "unsupported"

    # Status events
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"

    # Errors (top-level and failed statuses)
    ERRORS = "errors"


class ProcessResult(BaseModel):
    """Outcome of processing one webhook delivery."""

    status: str  # "dispatched" or "ignored"
    kind: Optional[NotificationKind] = None
    event: Optional[WebhookEventType] = None
