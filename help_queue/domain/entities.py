from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ControlStyle(str, Enum):
    PRIMARY = "primary"
    SUCCESS = "success"
    DANGER = "danger"


class QueueAction(str, Enum):
    """Verbs encoded in control action ids (``"<verb> <queue name>"``)."""

    JOIN = "join"
    LEAVE = "leave"
    NOTIFY = "notif"
    REMOVE_NOTIFY = "removeN"


class QueueControl(BaseModel):
    """A single interactive button shown under the queue message."""

    model_config = ConfigDict(frozen=True)

    action_id: str
    label: str
    emoji: str
    style: ControlStyle
    enabled: bool = True


class ControlRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    controls: tuple[QueueControl, ...]


class DisplayArtifact(BaseModel):
    """Handle to a message published on a display surface."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    message_id: str  # Slack: message ts


class QueueSnapshot(BaseModel):
    """Read-only view of a queue returned by the HTTP API."""

    name: str
    is_open: bool
    length: int
    members: list[str]
    helper_count: int
    notif_subscriber_count: int
