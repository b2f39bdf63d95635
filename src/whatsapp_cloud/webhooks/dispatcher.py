"""Inbound event dispatcher.

Turns a classified notification into one event and calls every
listener registered for it. Listener failures are logged and isolated;
asynchronous listeners run as background tasks the dispatcher does not
wait for.
"""

import asyncio
import inspect
import logging
from typing import Any, Optional, Set, Union

from .models import WebhookEventType
from .notification import NotificationView
from .registry import ListenerEntry, ListenerRegistry, WebhookListener

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Dispatches webhook events to registered listeners.

    Features:
    - Multiple listeners per event, called in registration order
    - One-time listeners
    - Per-listener error isolation
    - Fire-and-forget coroutine listeners

    Example:
        dispatcher = EventDispatcher()

        @dispatcher.listener("text")
        async def handle_text(text, view):
            await client.send_text(view.sender, f"Echo: {text['body']}")

        dispatcher.dispatch(NotificationView(document))
    """

    def __init__(self, registry: Optional[ListenerRegistry] = None):
        """Initialize dispatcher.

        Args:
            registry: Listener registry; a new empty one if omitted.
        """
        self.registry = registry or ListenerRegistry()
        self._pending: Set["asyncio.Task[Any]"] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on(self, event: Union[WebhookEventType, str], listener: WebhookListener) -> "EventDispatcher":
        """Register ``listener`` for every emission of ``event``."""
        self.registry.add(event, listener)
        return self

    def once(self, event: Union[WebhookEventType, str], listener: WebhookListener) -> "EventDispatcher":
        """Register ``listener`` for the next emission of ``event`` only."""
        self.registry.add(event, listener, once=True)
        return self

    def off(self, event: Union[WebhookEventType, str], listener: WebhookListener) -> bool:
        """Remove ``listener`` from ``event``.

        Returns:
            True if a registration was removed.
        """
        return self.registry.remove(event, listener)

    def listener(self, event: Union[WebhookEventType, str]):
        """Decorator to register a listener for an event.

        Example:
            @dispatcher.listener("delivered")
            def on_delivered(status, view):
                ...
        """
        def decorator(func: WebhookListener) -> WebhookListener:
            self.on(event, func)
            return func
        return decorator

    def remove_all_listeners(self, event: Optional[Union[WebhookEventType, str]] = None) -> int:
        return self.registry.clear(event)

    def listener_count(self, event: Union[WebhookEventType, str]) -> int:
        return self.registry.count(event)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, event: Union[WebhookEventType, str], payload: Any, view: NotificationView) -> bool:
        """Call every listener of ``event`` with ``(payload, view)``.

        The listener list is copied first, so listeners may register or
        remove listeners (including themselves) while this runs.

        Returns:
            True if the event had listeners.
        """
        event_type = WebhookEventType(event)
        entries = self.registry.snapshot(event_type)

        for entry in entries:
            if entry.once and not self.registry.discard(event_type, entry):
                # Already consumed or removed since the snapshot
                continue
            self._invoke(event_type, entry, payload, view)

        return bool(entries)

    def dispatch(self, view: NotificationView) -> Optional[WebhookEventType]:
        """Classify ``view`` and emit the matching event.

        Returns:
            The emitted event, or None when the document maps to no event.
        """
        event = view.resolve_event()
        if event is None:
            logger.debug(
                f"No event for notification (kind={view.kind}, "
                f"message_type={view.message_type!r}, status={view.status_value!r})"
            )
            return None

        handled = self.emit(event, view.event_payload(event), view)
        if not handled:
            logger.debug(f"No listeners for webhook event: {event.value}")
        return event

    async def wait_pending(self) -> None:
        """Wait for all asynchronous listeners started so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _invoke(self, event: WebhookEventType, entry: ListenerEntry, payload: Any, view: NotificationView) -> None:
        try:
            result = entry.callback(payload, view)
        except Exception:
            logger.exception(f"Listener {_name(entry.callback)} failed for event: {event.value}")
            return

        if inspect.isawaitable(result):
            self._schedule(event, entry, result)

    def _schedule(self, event: WebhookEventType, entry: ListenerEntry, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.error(f"Async listener {_name(entry.callback)} for {event.value} needs a running event loop")
            return

        task = asyncio.ensure_future(awaitable, loop=loop)

        self._pending.add(task)

        def _done(finished: "asyncio.Task[Any]") -> None:
            self._pending.discard(finished)
            if finished.cancelled():
                return
            error = finished.exception()
            if error is not None:
                logger.error(
                    f"Listener {_name(entry.callback)} failed for event: {event.value}",
                    exc_info=error,
                )

        task.add_done_callback(_done)


def _name(callback: WebhookListener) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
