"""FastAPI dependencies resolving shared objects from app.state."""
from __future__ import annotations

from fastapi import HTTPException, Request

from help_queue.adapters.slack import SlackMemberDirectory
from help_queue.services.queue_manager import QueueManager


def get_queue_manager(request: Request) -> QueueManager:
    manager = getattr(request.app.state, "queue_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="Queue manager not initialized")
    return manager


def get_member_directory(request: Request) -> SlackMemberDirectory:
    directory = getattr(request.app.state, "member_directory", None)
    if directory is None:
        raise HTTPException(status_code=503, detail="Member directory not initialized")
    return directory
