"""WhatsApp Cloud API client and webhook receiver.

- ``WhatsappClient``: sends messages with per-attempt timeouts and retries
- ``WebhookReceiver``: verifies, classifies and dispatches notifications
"""

from .client import WhatsappClient, RetryPolicy, timeout_retry_condition
from .core import ClientSettings, WebhookSettings, parse_api_version
from .errors import (
    WhatsappError, ConfigurationError, RequestTimeoutError, TransportError,
    SignatureVerificationError, MalformedPayloadError,
)
from .webhooks import (
    EventDispatcher, NotificationView, WebhookEventType, WebhookReceiver,
)

__version__ = "0.1.0"

__all__ = [
    "WhatsappClient",
    "RetryPolicy",
    "timeout_retry_condition",
    "ClientSettings",
    "WebhookSettings",
    "parse_api_version",
    "WhatsappError",
    "ConfigurationError",
    "RequestTimeoutError",
    "TransportError",
    "SignatureVerificationError",
    "MalformedPayloadError",
    "EventDispatcher",
    "NotificationView",
    "WebhookEventType",
    "WebhookReceiver",
]
