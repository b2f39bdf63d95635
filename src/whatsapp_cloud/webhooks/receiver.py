"""Inbound webhook receiver.

Handles the subscription handshake and incoming notification deliveries:
signature verification, JSON parsing, classification and dispatch.
"""

import hmac
import json
import logging
from typing import Any, Optional, Union

from ..core.settings import WebhookSettings
from ..errors import MalformedPayloadError, SignatureVerificationError
from .dispatcher import EventDispatcher
from .models import ProcessResult
from .notification import NotificationView
from .security import SignatureVerifier

logger = logging.getLogger(__name__)


class WebhookReceiver:
    """Receives and processes inbound webhook requests.

    Features:
    - ``hub.challenge`` subscription handshake
    - HMAC signature verification on the raw body
    - Classification and dispatch to registered listeners

    Example:
        receiver = WebhookReceiver(verify_token="token", app_secret="secret")

        @receiver.dispatcher.listener("text")
        async def handle_text(text, view):
            print(f"{view.sender}: {text['body']}")

        result = await receiver.process(raw_body, signature=header_value)
    """

    def __init__(
        self,
        verify_token: str,
        app_secret: Optional[str] = None,
        require_signature: bool = False,
        dispatcher: Optional[EventDispatcher] = None,
    ):
        """Initialize receiver.

        Args:
            verify_token: Token expected in the subscription handshake.
            app_secret: App secret for payload signatures. Without it,
                signatures are not checked.
            require_signature: Reject deliveries with no signature header
                when an app secret is configured.
            dispatcher: Event dispatcher; a new one if omitted.
        """
        self._verify_token = verify_token
        self.verifier = SignatureVerifier(app_secret)
        self.require_signature = require_signature
        self.dispatcher = dispatcher or EventDispatcher()

    @classmethod
    def from_settings(
        cls,
        settings: WebhookSettings,
        dispatcher: Optional[EventDispatcher] = None,
    ) -> "WebhookReceiver":
        return cls(
            verify_token=settings.verify_token,
            app_secret=settings.app_secret,
            require_signature=settings.require_signature,
            dispatcher=dispatcher,
        )

    # Listener registration shortcuts
    def on(self, event, listener) -> "WebhookReceiver":
        self.dispatcher.on(event, listener)
        return self

    def once(self, event, listener) -> "WebhookReceiver":
        self.dispatcher.once(event, listener)
        return self

    def off(self, event, listener) -> bool:
        return self.dispatcher.off(event, listener)

    def verify_subscription(
        self,
        mode: Optional[str],
        verify_token: Optional[str],
        challenge: Optional[str],
    ) -> Optional[str]:
        """Answer the platform's subscription handshake.

        Args:
            mode: ``hub.mode`` query parameter.
            verify_token: ``hub.verify_token`` query parameter.
            challenge: ``hub.challenge`` query parameter.

        Returns:
            The challenge to echo back, or None if the request must be rejected.
        """
        if not (mode and verify_token and challenge):
            return None

        if mode == "subscribe" and hmac.compare_digest(
            verify_token.encode("utf-8"), self._verify_token.encode("utf-8")
        ):
            logger.info("Webhook subscription verified")
            return challenge

        logger.warning(f"Rejected webhook subscription request (mode={mode!r})")
        return None

    async def process(
        self,
        raw_body: Union[bytes, str],
        signature: Optional[str] = None,
    ) -> ProcessResult:
        """Process an incoming notification delivery.

        Args:
            raw_body: The raw, unparsed request body.
            signature: The ``X-Hub-Signature-256`` header, if sent.

        Returns:
            Whether an event was dispatched. Unrecognized documents are
            acknowledged as ``ignored``.

        Raises:
            SignatureVerificationError: If the signature does not match, or is
                missing while required.
            MalformedPayloadError: If the body is not valid JSON.
        """
        if self.verifier.is_enabled:
            if signature:
                if not self.verifier.verify(raw_body, signature):
                    logger.warning("Invalid signature for webhook delivery")
                    raise SignatureVerificationError("Invalid payload signature")
            elif self.require_signature:
                logger.warning("Missing signature for webhook delivery")
                raise SignatureVerificationError("Missing payload signature")

        document = self._parse(raw_body)
        view = NotificationView(document)

        kind = view.kind
        if kind is None:
            logger.info("Ignoring webhook delivery with unrecognized shape")
            return ProcessResult(status="ignored")

        event = self.dispatcher.dispatch(view)
        if event is None:
            logger.info(f"Ignoring {kind.value} notification with no matching event")
            return ProcessResult(status="ignored", kind=kind)

        logger.info(f"Processed webhook event: {event.value}")
        return ProcessResult(status="dispatched", kind=kind, event=event)

    @staticmethod
    def _parse(raw_body: Union[bytes, str]) -> Any:
        try:
            return json.loads(raw_body)
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Malformed webhook payload: {e}")
            raise MalformedPayloadError("Invalid JSON payload") from e
