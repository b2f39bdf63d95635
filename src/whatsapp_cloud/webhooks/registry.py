"""Webhook listener registry.

Stores listener callbacks per event name, in registration order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from .models import WebhookEventType

logger = logging.getLogger(__name__)

# (event object, NotificationView) -> None or awaitable
WebhookListener = Callable[[Any, Any], Union[None, Awaitable[None]]]


@dataclass(frozen=True, eq=False)
class ListenerEntry:
    """A registered listener."""

    callback: WebhookListener
    once: bool = False


def _event(event: Union[WebhookEventType, str]) -> WebhookEventType:
    """Coerce an event name, rejecting names that are never emitted."""
    try:
        return WebhookEventType(event)
    except ValueError:
        raise ValueError(f"Unknown webhook event: {event!r}") from None


class ListenerRegistry:
    """In-memory registry of webhook listeners.

    Several listeners may be registered for the same event; the same
    callback may even be registered twice and will then run twice.

    Example:
        registry = ListenerRegistry()
        registry.add("text", on_text)
        registry.add("errors", on_errors, once=True)

        for entry in registry.snapshot("text"):
            entry.callback(text, view)
    """

    def __init__(self):
        """Initialize empty registry."""
        self._listeners: Dict[WebhookEventType, List[ListenerEntry]] = {}

    def add(
        self,
        event: Union[WebhookEventType, str],
        callback: WebhookListener,
        once: bool = False,
    ) -> ListenerEntry:
        """Register a listener.

        Args:
            event: Event name to listen to.
            callback: Called with ``(event_object, view)``.
            once: Remove the listener before its first invocation.

        Returns:
            The registry entry.

        Raises:
            ValueError: If ``event`` is not a known event name.
            TypeError: If ``callback`` is not callable.
        """
        if not callable(callback):
            raise TypeError(f"invalid type {type(callback).__name__} for listener callback")

        event_type = _event(event)
        entry = ListenerEntry(callback=callback, once=once)
        self._listeners.setdefault(event_type, []).append(entry)
        logger.debug(f"Registered {'one-time ' if once else ''}listener for event: {event_type.value}")
        return entry

    def remove(self, event: Union[WebhookEventType, str], callback: WebhookListener) -> bool:
        """Remove the most recently registered entry for ``callback``.

        Returns:
            True if removed, False if not found.
        """
        entries = self._listeners.get(_event(event), [])
        for index in range(len(entries) - 1, -1, -1):
            if entries[index].callback == callback:
                del entries[index]
                return True
        return False

    def discard(self, event: WebhookEventType, entry: ListenerEntry) -> bool:
        """Remove one specific entry.

        Returns:
            True if removed, False if it was already gone.
        """
        entries = self._listeners.get(event, [])
        for index, candidate in enumerate(entries):
            if candidate is entry:
                del entries[index]
                return True
        return False

    def clear(self, event: Optional[Union[WebhookEventType, str]] = None) -> int:
        """Remove all listeners for ``event``, or for every event.

        Returns:
            Number of listeners removed.
        """
        if event is None:
            count = sum(len(entries) for entries in self._listeners.values())
            self._listeners.clear()
        else:
            count = len(self._listeners.pop(_event(event), []))
        logger.info(f"Cleared {count} webhook listeners")
        return count

    def snapshot(self, event: Union[WebhookEventType, str]) -> List[ListenerEntry]:
        """Copy of the listeners for ``event`` at this moment."""
        return list(self._listeners.get(_event(event), []))

    def count(self, event: Union[WebhookEventType, str]) -> int:
        return len(self._listeners.get(_event(event), []))

    def events(self) -> List[WebhookEventType]:
        """Events that currently have at least one listener."""
        return [event for event, entries in self._listeners.items() if entries]
