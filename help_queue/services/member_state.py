"""In-process member state registry.

Tracks which queue each member currently waits in and enforces that a member
waits in at most one queue at a time.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from help_queue.domain.ports import MemberHandle
from help_queue.exceptions import AlreadyQueuedError

if TYPE_CHECKING:
    from help_queue.services.help_queue import HelpQueue

logger = logging.getLogger(__name__)


class MemberState:
    """Bookkeeping for a single member."""

    def __init__(self, member: MemberHandle) -> None:
        self.member = member
        self.queue: Optional[HelpQueue] = None

    @property
    def is_queued(self) -> bool:
        return self.queue is not None

    def try_add_to_queue(self, queue: HelpQueue) -> None:
        """Associate the member with ``queue``.

        Raises:
            AlreadyQueuedError: If the member already waits in a queue
                (including ``queue`` itself). Nothing is changed.
        """
        if self.queue is not None:
            raise AlreadyQueuedError(self.member.display_name, self.queue.name)
        self.queue = queue

    def try_remove_from_queue(self, queue: HelpQueue) -> None:
        """Drop the association with ``queue``; no-op for any other queue."""
        if self.queue is queue:
            self.queue = None


class MemberStateManager:
    """Registry of MemberState objects keyed by member handle identity."""

    def __init__(self) -> None:
        self._states: dict[MemberHandle, MemberState] = {}

    def get_or_create_state(self, member: MemberHandle) -> MemberState:
        state = self._states.get(member)
        if state is None:
            state = MemberState(member)
            self._states[member] = state
            logger.debug("Created member state for %s", member.display_name)
        return state

    def get_state(self, member: MemberHandle) -> Optional[MemberState]:
        return self._states.get(member)

    def __len__(self) -> int:
        return len(self._states)
