"""WhatsApp Cloud webhook service - FastAPI application.

Serves the webhook subscription handshake and notification deliveries.

Run with:
    uvicorn whatsapp_cloud.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .core.logging_config import setup_logging
from .core.settings import WebhookSettings
from .webhooks import WebhookReceiver, create_webhook_router

API_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[WebhookSettings] = None,
    receiver: Optional[WebhookReceiver] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Webhook settings; loaded from the environment if omitted.
        receiver: Pre-configured receiver (with listeners registered).
            Built from ``settings`` if omitted.

    Returns:
        The configured application. The receiver is available as
        ``app.state.receiver``.
    """
    settings = settings or WebhookSettings()
    receiver = receiver or WebhookReceiver.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        yield
        await receiver.dispatcher.wait_pending()

    app = FastAPI(
        title="WhatsApp Cloud Webhooks",
        description="Receive, verify and dispatch WhatsApp Cloud API webhook notifications.",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.receiver = receiver

    # --- Exception Handlers ---

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"code": exc.status_code, "message": exc.detail}},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error for {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": {"code": 500, "message": "Internal server error"}},
        )

    # --- Routes ---

    app.include_router(create_webhook_router(receiver, settings.webhook_path))

    @app.get("/", summary="API root")
    def root() -> dict:
        return {"status": "ok", "version": API_VERSION}

    @app.get("/health", summary="Health check")
    def health() -> dict:
        """Health check endpoint for monitoring and load balancers."""
        return {"status": "healthy"}

    return app
