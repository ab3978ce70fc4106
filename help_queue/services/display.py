"""Queue display publisher.

Renders a queue's state as text and keeps exactly one pinned message per
display channel up to date with it.
"""
from __future__ import annotations

import io
import logging
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from help_queue.domain.entities import (
    ControlRow,
    ControlStyle,
    DisplayArtifact,
    QueueAction,
    QueueControl,
)
from help_queue.domain.ports import DisplaySurface, MemberHandle

logger = logging.getLogger(__name__)

# Wide enough that usernames never wrap inside the table
TABLE_RENDER_WIDTH = 200


def build_controls(queue_name: str, is_open: bool) -> list[ControlRow]:
    """Build the join/leave and notification control rows for a queue."""
    join_leave = ControlRow(controls=(
        QueueControl(
            action_id=f"{QueueAction.JOIN.value} {queue_name}",
            label="Join Queue",
            emoji="✅",
            style=ControlStyle.SUCCESS,
            enabled=is_open,
        ),
        QueueControl(
            action_id=f"{QueueAction.LEAVE.value} {queue_name}",
            label="Leave Queue",
            emoji="❎",
            style=ControlStyle.DANGER,
            enabled=is_open,
        ),
    ))
    notifications = ControlRow(controls=(
        QueueControl(
            action_id=f"{QueueAction.NOTIFY.value} {queue_name}",
            label="Notify When Open",
            emoji="🔔",
            style=ControlStyle.PRIMARY,
            enabled=not is_open,
        ),
        QueueControl(
            action_id=f"{QueueAction.REMOVE_NOTIFY.value} {queue_name}",
            label="Remove Notifications",
            emoji="🔕",
            style=ControlStyle.PRIMARY,
            enabled=not is_open,
        ),
    ))
    return [join_leave, notifications]


class QueueDisplayPublisher:
    """Publishes queue state to a single pinned message on a display surface.

    The message is created lazily on the first publish and re-created if it is
    ever lost. ``reconcile`` repairs drift between the tracked handle and what
    is actually pinned in the channel.
    """

    def __init__(
        self,
        surface: DisplaySurface,
        published_artifact: Optional[DisplayArtifact] = None,
    ) -> None:
        self._surface = surface
        self.published_artifact = published_artifact

    @staticmethod
    def render(queue_name: str, is_open: bool, members: Sequence[MemberHandle]) -> str:
        """Return the status line plus, for a non-empty queue, a position table."""
        count = len(members)
        quantity = "is 1 person" if count == 1 else f"are {count} people"
        status_line = (
            f"The queue is **{'OPEN' if is_open else 'CLOSED'}**. "
            f"There {quantity} in the queue.\n"
        )
        if count == 0:
            return status_line

        table = Table(box=box.ASCII, show_edge=True)
        table.add_column("Position", justify="right")
        table.add_column("Username", no_wrap=True)
        for position, member in enumerate(members, 1):
            table.add_row(str(position), Text(member.display_name))

        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=TABLE_RENDER_WIDTH,
            color_system=None,
            force_terminal=False,
            highlight=False,
        )
        console.print(table)
        rendered = buffer.getvalue().rstrip("\n")
        return status_line + "```\n" + rendered + "\n```"

    async def reconcile(self) -> None:
        """Make the tracked handle agree with the pinned messages in the channel.

        Zero pinned messages: forget the handle. More than one: delete all of
        them and forget the handle. Exactly one: adopt it.
        """
        artifacts = await self._surface.list_published()

        if len(artifacts) > 1:
            logger.info(
                "Found %d published queue messages, deleting all of them",
                len(artifacts),
            )
            for artifact in artifacts:
                try:
                    await self._surface.delete(artifact)
                except Exception:
                    logger.warning(
                        "Failed to delete queue message %s",
                        artifact.message_id,
                        exc_info=True,
                    )
            self.published_artifact = None
        elif not artifacts:
            if self.published_artifact is not None:
                logger.info("Published queue message is gone, a new one will be created")
            self.published_artifact = None
        elif self.published_artifact != artifacts[0]:
            logger.info("Adopting existing queue message %s", artifacts[0].message_id)
            self.published_artifact = artifacts[0]

    async def publish(
        self,
        queue_name: str,
        is_open: bool,
        members: Sequence[MemberHandle],
    ) -> None:
        """Edit the published message, creating it first if none is tracked."""
        content = self.render(queue_name, is_open, members)
        controls = build_controls(queue_name, is_open)

        if self.published_artifact is None:
            await self.reconcile()

        if self.published_artifact is None:
            self.published_artifact = await self._surface.create(content, controls)
            logger.debug(
                "Created queue message %s for %s",
                self.published_artifact.message_id,
                queue_name,
            )
            return

        try:
            await self._surface.edit(self.published_artifact, content, controls)
        except Exception:
            # Handle stays as-is; reconcile() detects a deleted message
            logger.warning(
                "Failed to edit queue message for %s", queue_name, exc_info=True
            )
