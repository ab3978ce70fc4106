"""TGO Help Queue Service - FastAPI Application Entry Point."""
from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from slack_sdk.web.async_client import AsyncWebClient

from help_queue import __version__
from help_queue.adapters.slack import (
    SlackDirectMessenger,
    SlackDisplaySurface,
    SlackMemberDirectory,
)
from help_queue.api.error_utils import register_exception_handlers
from help_queue.api.v1 import callbacks, health, queues
from help_queue.core.config import settings
from help_queue.core.logging import setup_logging
from help_queue.services.queue_manager import QueueManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the Slack client and one queue per configured channel."""
    setup_logging()
    logger.info("Starting TGO Help Queue Service...")

    client = AsyncWebClient(
        token=settings.slack_bot_token,
        timeout=settings.request_timeout_seconds,
    )
    app.state.slack_client = client
    app.state.member_directory = SlackMemberDirectory(client)
    app.state.queue_manager = QueueManager.from_channels(
        settings.queue_channels,
        surface_factory=lambda channel_id: SlackDisplaySurface(client, channel_id),
        messenger=SlackDirectMessenger(client),
    )
    logger.info(f"Registered queues: {', '.join(app.state.queue_manager.names()) or '(none)'}")

    # Every queue starts closed and empty; make its pinned message say so
    await app.state.queue_manager.ensure_all_safe()

    try:
        yield
    finally:
        logger.info("Shutting down TGO Help Queue Service...")


app = FastAPI(
    title="TGO Help Queue",
    description="First-come-first-served help queues for chat-based office hours",
    version=__version__,
    lifespan=lifespan,
    docs_url="/v1/docs",
    redoc_url="/v1/redoc",
)

register_exception_handlers(app)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests for tracing."""
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    response = await call_next(request)
    response.headers["x-request-id"] = rid
    return response


app.include_router(health.router, tags=["health"])
app.include_router(queues.router, prefix="/v1")
app.include_router(callbacks.router, prefix="/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "help_queue.main:app",
        host=settings.host,
        port=settings.port,
    )
