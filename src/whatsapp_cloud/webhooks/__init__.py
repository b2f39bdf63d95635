"""Webhooks module for inbound WhatsApp Cloud notifications.

Provides:
- Subscription handshake and HMAC signature verification
- A read-only view over the nested notification document
- Event dispatch to registered listeners
"""

from .models import (
    NotificationKind, MessageType, StatusValue, WebhookEventType, ProcessResult,
)
from .security import SignatureVerifier, generate_signature, verify_signature
from .notification import NotificationView
from .registry import ListenerRegistry, WebhookListener
from .dispatcher import EventDispatcher
from .receiver import WebhookReceiver
from .router import create_webhook_router

__all__ = [
    "NotificationKind",
    "MessageType",
    "StatusValue",
    "WebhookEventType",
    "ProcessResult",
    "SignatureVerifier",
    "generate_signature",
    "verify_signature",
    "NotificationView",
    "ListenerRegistry",
    "WebhookListener",
    "EventDispatcher",
    "WebhookReceiver",
    "create_webhook_router",
]
