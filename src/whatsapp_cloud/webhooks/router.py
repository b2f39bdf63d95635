"""Webhook API routes.

FastAPI router exposing the subscription handshake (``GET``) and the
notification delivery endpoint (``POST``) for a :class:`WebhookReceiver`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from ..errors import MalformedPayloadError, SignatureVerificationError
from .receiver import WebhookReceiver

logger = logging.getLogger(__name__)


def create_webhook_router(receiver: WebhookReceiver, path: str = "/webhook") -> APIRouter:
    """Build the webhook router for ``receiver``.

    Args:
        receiver: The receiver handling verified deliveries.
        path: Route path for both endpoints.

    Returns:
        An ``APIRouter`` to include in the application.
    """
    router = APIRouter(tags=["webhooks"])

    @router.get(path, response_class=PlainTextResponse, summary="Verify webhook subscription")
    async def verify_subscription(
        mode: Optional[str] = Query(None, alias="hub.mode"),
        verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
        challenge: Optional[str] = Query(None, alias="hub.challenge"),
    ):
        """Echo ``hub.challenge`` when the verify token matches."""
        answer = receiver.verify_subscription(mode, verify_token, challenge)
        if answer is None:
            raise HTTPException(status_code=403, detail="Verification failed")
        return PlainTextResponse(answer)

    @router.post(path, summary="Receive a webhook notification")
    async def receive_notification(
        request: Request,
        x_hub_signature_256: Optional[str] = Header(None),
    ):
        """Verify, classify and dispatch a notification.

        Unrecognized but well-formed payloads are still acknowledged so the
        platform does not keep redelivering them.
        """
        raw_body = await request.body()

        try:
            result = await receiver.process(raw_body, signature=x_hub_signature_256)
        except SignatureVerificationError as e:
            raise HTTPException(status_code=401, detail=str(e))
        except MalformedPayloadError as e:
            raise HTTPException(status_code=400, detail=str(e))

        return result.model_dump(mode="json", exclude_none=True)

    return router
