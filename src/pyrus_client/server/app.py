"""FastAPI app factory.

The webhook route is a thin wrapper over :class:`WebhookReceiver`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool

from pyrus_client import __version__
from pyrus_client.core.config import PyrusSettings
from pyrus_client.webhook import SIGNATURE_HEADER, WebhookReceiver

logger = logging.getLogger(__name__)


def create_app(
    settings: PyrusSettings | None = None,
    receiver: WebhookReceiver | None = None,
) -> FastAPI:
    """Build the webhook app.

    ``settings`` defaults to the environment. A ``receiver`` built elsewhere
    (for example by :meth:`PyrusClient.webhook_receiver`) can be shared so
    that the same process consumes its queue.
    """

    settings = settings or PyrusSettings()
    receiver = receiver or WebhookReceiver(
        settings.security_key, buffer_size=settings.event_buffer_size
    )

    app = FastAPI(
        title="Pyrus webhook receiver",
        version=__version__,
        description="Verifies signed Pyrus webhook calls and queues their events.",
    )

    # Consumers read events from app.state.receiver.events.
    app.state.settings = settings
    app.state.receiver = receiver

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(settings.webhook_path)
    async def webhook(request: Request) -> Response:
        body = await request.body()
        signature = request.headers.get(SIGNATURE_HEADER)
        # handle() blocks while the queue is full, so keep it off the event loop.
        status, content = await run_in_threadpool(receiver.handle, body, signature)
        media_type = "application/json" if content else None
        return Response(content=content, status_code=status, media_type=media_type)

    logger.debug("Webhook app created", extra={"path": settings.webhook_path})
    return app
