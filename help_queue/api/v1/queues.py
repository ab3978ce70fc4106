"""Queue management endpoints.

Called by the command layer on behalf of helpers. Callers are expected to have
checked that the acting user is allowed to help in the queue.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from help_queue.api.deps import get_member_directory, get_queue_manager
from help_queue.domain.entities import QueueSnapshot
from help_queue.services.queue_manager import QueueManager

router = APIRouter(prefix="/queues", tags=["queues"])
logger = logging.getLogger(__name__)


class HelperRequest(BaseModel):
    user_id: str = Field(..., description="Platform user ID of the helper")
    mute_notifications: bool = Field(
        default=False,
        description="Open the queue without notifying subscribed members",
    )


class DequeueResponse(BaseModel):
    user_id: str
    display_name: str
    queue: QueueSnapshot


class NextMemberResponse(BaseModel):
    user_id: Optional[str] = None
    display_name: Optional[str] = None


@router.get("", response_model=list[QueueSnapshot])
async def list_queues(manager: QueueManager = Depends(get_queue_manager)):
    return [queue.snapshot() for queue in manager]


@router.get("/{name}", response_model=QueueSnapshot)
async def get_queue(name: str, manager: QueueManager = Depends(get_queue_manager)):
    return manager.get(name).snapshot()


@router.get("/{name}/peek", response_model=NextMemberResponse)
async def peek_queue(name: str, manager: QueueManager = Depends(get_queue_manager)):
    member = manager.get(name).peek()
    if member is None:
        return NextMemberResponse()
    return NextMemberResponse(user_id=member.id, display_name=member.display_name)


@router.post("/{name}/helpers", response_model=QueueSnapshot)
async def add_helper(
    name: str,
    body: HelperRequest,
    manager: QueueManager = Depends(get_queue_manager),
    directory=Depends(get_member_directory),
):
    queue = manager.get(name)
    member = await directory.resolve(body.user_id)
    await queue.add_helper(member, mute_notifications=body.mute_notifications)
    return queue.snapshot()


@router.delete("/{name}/helpers/{user_id}", response_model=QueueSnapshot)
async def remove_helper(
    name: str,
    user_id: str,
    manager: QueueManager = Depends(get_queue_manager),
    directory=Depends(get_member_directory),
):
    queue = manager.get(name)
    member = await directory.resolve(user_id)
    await queue.remove_helper(member)
    return queue.snapshot()


@router.post("/{name}/dequeue", response_model=DequeueResponse)
async def dequeue(name: str, manager: QueueManager = Depends(get_queue_manager)):
    queue = manager.get(name)
    member = await queue.dequeue()
    logger.info(f"Dequeued {member.display_name} from {name}")
    return DequeueResponse(
        user_id=member.id,
        display_name=member.display_name,
        queue=queue.snapshot(),
    )


@router.post("/{name}/clear", response_model=QueueSnapshot)
async def clear_queue(name: str, manager: QueueManager = Depends(get_queue_manager)):
    queue = manager.get(name)
    await queue.clear()
    return queue.snapshot()


@router.post("/{name}/ensure-safe", response_model=QueueSnapshot)
async def ensure_queue_safe(name: str, manager: QueueManager = Depends(get_queue_manager)):
    """Repair the pinned queue message, then refresh it."""
    queue = manager.get(name)
    await queue.ensure_queue_safe()
    await queue.update_display()
    return queue.snapshot()
