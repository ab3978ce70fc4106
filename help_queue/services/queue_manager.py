"""Owns every configured HelpQueue for the lifetime of the process."""
from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from help_queue.domain.ports import DirectMessenger, DisplaySurface, MemberHandle
from help_queue.exceptions import QueueNotFoundError
from help_queue.services.display import QueueDisplayPublisher
from help_queue.services.help_queue import HelpQueue
from help_queue.services.member_state import MemberStateManager

logger = logging.getLogger(__name__)


class QueueManager:
    """Registry of help queues by name, sharing one member state registry."""

    def __init__(
        self,
        member_state_manager: Optional[MemberStateManager] = None,
    ) -> None:
        self.member_state_manager = member_state_manager or MemberStateManager()
        self._queues: dict[str, HelpQueue] = {}

    @classmethod
    def from_channels(
        cls,
        queue_channels: dict[str, str],
        surface_factory: Callable[[str], DisplaySurface],
        messenger: DirectMessenger,
    ) -> "QueueManager":
        """Build one queue per ``queue name -> display channel id`` entry."""
        manager = cls()
        for name, channel_id in queue_channels.items():
            manager.add_queue(name, surface_factory(channel_id), messenger)
        return manager

    def add_queue(
        self,
        name: str,
        surface: DisplaySurface,
        messenger: DirectMessenger,
    ) -> HelpQueue:
        if name in self._queues:
            raise ValueError(f"Queue '{name}' already exists")
        queue = HelpQueue(
            name=name,
            display_publisher=QueueDisplayPublisher(surface),
            member_state_manager=self.member_state_manager,
            messenger=messenger,
        )
        self._queues[name] = queue
        logger.info("Registered queue %s", name)
        return queue

    def get(self, name: str) -> HelpQueue:
        queue = self._queues.get(name)
        if queue is None:
            raise QueueNotFoundError(name)
        return queue

    def names(self) -> list[str]:
        return list(self._queues)

    def __iter__(self) -> Iterator[HelpQueue]:
        return iter(self._queues.values())

    def __len__(self) -> int:
        return len(self._queues)

    def queue_of(self, member: MemberHandle) -> Optional[HelpQueue]:
        """Return the queue ``member`` currently waits in, if any."""
        state = self.member_state_manager.get_state(member)
        if state is None:
            return None
        return state.queue

    async def ensure_all_safe(self) -> None:
        """Reconcile and refresh every queue's display, e.g. at startup."""
        for queue in self._queues.values():
            try:
                await queue.ensure_queue_safe()
            except Exception:
                logger.warning("Failed to reconcile display for queue %s", queue.name, exc_info=True)
            await queue.update_display()
