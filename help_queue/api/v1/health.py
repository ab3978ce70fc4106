"""Health check endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from help_queue import __version__
from help_queue.api.deps import get_queue_manager
from help_queue.core.config import settings
from help_queue.services.queue_manager import QueueManager

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    queues: int
    open_queues: int


@router.get("/health", response_model=HealthResponse)
async def health_check(manager: QueueManager = Depends(get_queue_manager)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=__version__,
        queues=len(manager),
        open_queues=sum(1 for queue in manager if queue.is_open),
    )
