"""Read-only view over a webhook notification document.

The Cloud API nests the interesting part of a delivery four levels deep::

    {"entry": [{"changes": [{"value": {"messages": [...], ...}}]}]}

Only the first entry and its first change are read. Every accessor
walks the document again on access and returns None as soon as a level
is missing or has an unexpected type; nothing here raises.
"""

from typing import Any, Dict, List, Optional

from .models import (
    INFERRED_MESSAGE_TYPES,
    MessageType,
    NotificationKind,
    StatusValue,
    WebhookEventType,
)


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def _first(items: Any) -> Optional[Dict[str, Any]]:
    """First element of a list, if it is an object."""
    if not (isinstance(items, list) and items):
        return None
    return items[0] if isinstance(items[0], dict) else None


def _list(obj: Any, key: str) -> Optional[List[Any]]:
    items = _get(obj, key)
    return items if isinstance(items, list) else None


class NotificationView:
    """Typed accessors over one parsed notification document.

    Example:
        view = NotificationView(json.loads(raw_body))
        if view.kind is NotificationKind.MESSAGE and view.message_type == "text":
            print(view.sender, view.text["body"])
    """

    def __init__(self, document: Any):
        self._document = document

    def __repr__(self) -> str:
        kind = self.kind
        return f"NotificationView(kind={kind.value if kind else None!r}, id={self.id!r})"

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def raw(self) -> Any:
        return self._document

    @property
    def entry(self) -> Optional[Dict[str, Any]]:
        return _first(_get(self._document, "entry"))

    @property
    def change(self) -> Optional[Dict[str, Any]]:
        return _first(_get(self.entry, "changes"))

    @property
    def value(self) -> Optional[Dict[str, Any]]:
        value = _get(self.change, "value")
        return value if isinstance(value, dict) else None

    @property
    def metadata(self) -> Optional[Dict[str, Any]]:
        return _get(self.value, "metadata")

    @property
    def contacts(self) -> Optional[List[Dict[str, Any]]]:
        return _list(self.value, "contacts")

    @property
    def contact(self) -> Optional[Dict[str, Any]]:
        return _first(self.contacts)

    @property
    def statuses(self) -> Optional[List[Dict[str, Any]]]:
        return _list(self.value, "statuses")

    @property
    def status(self) -> Optional[Dict[str, Any]]:
        return _first(self.statuses)

    @property
    def errors(self) -> Optional[List[Dict[str, Any]]]:
        return _list(self.value, "errors")

    @property
    def error(self) -> Optional[Dict[str, Any]]:
        return _first(self.errors)

    @property
    def messages(self) -> Optional[List[Dict[str, Any]]]:
        return _list(self.value, "messages")

    @property
    def message(self) -> Optional[Dict[str, Any]]:
        return _first(self.messages)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def kind(self) -> Optional[NotificationKind]:
        """Which branch of the value is populated, or None if none is."""
        if self.message is not None:
            return NotificationKind.MESSAGE
        if self.status is not None:
            return NotificationKind.STATUS
        if self.error is not None:
            return NotificationKind.ERRORS
        return None

    @property
    def message_type(self) -> Optional[str]:
        """Tag of the first message.

        The explicit ``type`` field wins. Some payloads omit it, in which
        case the first present sub-object in :data:`INFERRED_MESSAGE_TYPES`
        order names the type. The returned string may be a tag this
        package does not know; callers must treat those as unrecognized.
        """
        message = self.message
        if message is None:
            return None

        explicit = message.get("type")
        if isinstance(explicit, str) and explicit:
            return explicit

        for message_type in INFERRED_MESSAGE_TYPES:
            if message.get(message_type.value) is not None:
                return message_type.value

        # Never expected for genuine payloads
        return None

    @property
    def status_value(self) -> Optional[str]:
        return _get(self.status, "status")

    # ------------------------------------------------------------------
    # Message sub-objects
    # ------------------------------------------------------------------

    @property
    def text(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "text")

    @property
    def reaction(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "reaction")

    @property
    def sticker(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "sticker")

    @property
    def audio(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "audio")

    @property
    def document(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "document")

    @property
    def image(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "image")

    @property
    def video(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "video")

    @property
    def location(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "location")

    @property
    def message_contacts(self) -> Optional[List[Dict[str, Any]]]:
        """Contact cards shared in the message (not ``value.contacts``)."""
        return _list(self.message, "contacts")

    @property
    def button(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "button")

    @property
    def interactive(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "interactive")

    @property
    def interactive_type(self) -> Optional[str]:
        return _get(self.interactive, "type")

    @property
    def order(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "order")

    @property
    def system(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "system")

    @property
    def context(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "context")

    @property
    def identity(self) -> Optional[Dict[str, Any]]:
        return _get(self.message, "identity")

    @property
    def referral(self) -> Any:
        return _get(self.message, "referral")

    @property
    def message_errors(self) -> Optional[List[Dict[str, Any]]]:
        return _list(self.message, "errors")

    @property
    def message_error(self) -> Optional[Dict[str, Any]]:
        return _first(self.message_errors)

    @property
    def status_errors(self) -> Optional[List[Dict[str, Any]]]:
        return _list(self.status, "errors")

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def sender(self) -> Optional[str]:
        return _get(self.message, "from")

    @property
    def recipient_id(self) -> Optional[str]:
        return _get(self.status, "recipient_id")

    @property
    def phone_number_id(self) -> Optional[str]:
        return _get(self.metadata, "phone_number_id")

    @property
    def id(self) -> Optional[str]:
        kind = self.kind
        if kind is NotificationKind.MESSAGE:
            return _get(self.message, "id")
        if kind is NotificationKind.STATUS:
            return _get(self.status, "id")
        return None

    @property
    def timestamp(self) -> Optional[str]:
        kind = self.kind
        if kind is NotificationKind.MESSAGE:
            return _get(self.message, "timestamp")
        if kind is NotificationKind.STATUS:
            return _get(self.status, "timestamp")
        return None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def event_payload(self, event: WebhookEventType) -> Any:
        """Object carried by ``event`` for this document.

        Args:
            event: The event being emitted.

        Returns:
            The message sub-object for message events, the status object for
            sent/delivered/read, and the relevant errors array for ``errors``.
        """
        if event is WebhookEventType.ERRORS:
            if self.kind is NotificationKind.STATUS:
                return self.status_errors
            return self.errors
        if event in (WebhookEventType.SENT, WebhookEventType.DELIVERED, WebhookEventType.READ):
            return self.status
        if event is WebhookEventType.CONTACTS:
            return self.message_contacts
        if event in (WebhookEventType.UNKNOWN, WebhookEventType.UNSUPPORTED):
            return self.message_error
        return _get(self.message, event.value)

    def resolve_event(self) -> Optional[WebhookEventType]:
        """The single event this document should emit, if any.

        - message: the message tag, when it is a known one
        - status: sent/delivered/read as is, failed as ``errors``
        - errors: ``errors``
        """
        kind = self.kind

        if kind is NotificationKind.MESSAGE:
            try:
                return WebhookEventType(MessageType(self.message_type).value)
            except ValueError:
                return None

        if kind is NotificationKind.STATUS:
            try:
                status = StatusValue(self.status_value)
            except ValueError:
                return None
            if status is StatusValue.FAILED:
                return WebhookEventType.ERRORS
            return WebhookEventType(status.value)

        if kind is NotificationKind.ERRORS:
            return WebhookEventType.ERRORS

        return None
