"""First-come-first-served help queue.

One HelpQueue exists per configured queue channel. Members wait in FIFO
order; the queue is open exactly while at least one helper is available.
Members may subscribe to be told when a closed queue reopens.

Every public operation finishes its in-memory state change before its first
``await``, so operations interleaved on the event loop never observe a
half-applied change. Display refreshes and direct messages happen afterwards
and are best-effort.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from help_queue.domain.entities import QueueSnapshot
from help_queue.domain.ports import (
    DirectMessenger,
    MemberHandle,
    MemberState,
    MemberStateRegistry,
)
from help_queue.exceptions import EmptyQueueError
from help_queue.services.display import QueueDisplayPublisher

logger = logging.getLogger(__name__)


class HelpQueue:
    def __init__(
        self,
        name: str,
        display_publisher: QueueDisplayPublisher,
        member_state_manager: MemberStateRegistry,
        messenger: DirectMessenger,
    ) -> None:
        self._name = name
        self._display_publisher = display_publisher
        self._member_state_manager = member_state_manager
        self._messenger = messenger
        self._queue: list[MemberState] = []
        self._helpers: set[MemberHandle] = set()
        self._notif_queue: set[MemberHandle] = set()

    @property
    def name(self) -> str:
        return self._name

    @property
    def length(self) -> int:
        return len(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def is_open(self) -> bool:
        return len(self._helpers) > 0

    @property
    def members(self) -> tuple[MemberHandle, ...]:
        """Queued members, front of the queue first."""
        return tuple(state.member for state in self._queue)

    @property
    def helpers(self) -> frozenset[MemberHandle]:
        return frozenset(self._helpers)

    @property
    def notif_subscribers(self) -> frozenset[MemberHandle]:
        return frozenset(self._notif_queue)

    def is_member(self, member: MemberHandle) -> bool:
        return any(state.member is member for state in self._queue)

    has = is_member

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            name=self._name,
            is_open=self.is_open,
            length=len(self._queue),
            members=[state.member.display_name for state in self._queue],
            helper_count=len(self._helpers),
            notif_subscriber_count=len(self._notif_queue),
        )

    async def update_display(self) -> None:
        """Push the current state to the display channel.

        A failure leaves the queue state intact and the display stale;
        ``ensure_queue_safe`` followed by another update repairs it.
        """
        try:
            await self._display_publisher.publish(self._name, self.is_open, self.members)
        except Exception:
            logger.warning("Failed to refresh display for queue %s", self._name, exc_info=True)

    async def ensure_queue_safe(self) -> None:
        await self._display_publisher.reconcile()

    async def add_helper(self, member: MemberHandle, mute_notifications: bool = False) -> None:
        """Mark ``member`` as available to help, opening the queue if it was closed."""
        if member in self._helpers:
            logger.warning(
                "Queue %s already has helper %s. Ignoring call to add_helper",
                self._name,
                member.display_name,
            )
            return
        self._helpers.add(member)

        # Only the first helper can open the queue. Subscribing is only possible
        # while closed, so with other helpers present nobody is waiting to be told.
        if len(self._helpers) == 1 and not mute_notifications:
            await self._notify_subscribers()
        await self.update_display()

    async def remove_helper(self, member: MemberHandle) -> None:
        if member not in self._helpers:
            logger.warning(
                "Queue %s does not have helper %s. Ignoring call to remove_helper",
                self._name,
                member.display_name,
            )
            return
        self._helpers.discard(member)
        await self.update_display()

    async def enqueue(self, member: MemberHandle) -> None:
        """Add ``member`` to the back of the queue.

        Raises:
            AlreadyQueuedError: If the member already waits in any queue.
        """
        state = self._member_state_manager.get_or_create_state(member)
        state.try_add_to_queue(self)
        self._queue.append(state)

        if len(self._queue) == 1:
            # 0 -> 1: let the helpers know someone is waiting
            await self._send_all(
                self._helpers,
                f'Heads up! {member.mention} has joined "{self._name}".',
            )
        await self.update_display()

    async def remove(self, member: MemberHandle) -> None:
        state = self._member_state_manager.get_state(member)
        if state is not None:
            state.try_remove_from_queue(self)
        self._queue = [queued for queued in self._queue if queued.member is not member]
        await self.update_display()

    async def dequeue(self) -> MemberHandle:
        """Remove and return the member at the front of the queue.

        Raises:
            EmptyQueueError: If nobody is waiting. State is left unchanged.
        """
        if not self._queue:
            raise EmptyQueueError(self._name)
        state = self._queue.pop(0)
        state.try_remove_from_queue(self)
        await self.update_display()
        return state.member

    def peek(self) -> Optional[MemberHandle]:
        if not self._queue:
            return None
        return self._queue[0].member

    async def clear(self) -> None:
        for state in self._queue:
            state.try_remove_from_queue(self)
        self._queue = []
        await self.update_display()

    async def add_to_notif_queue(self, member: MemberHandle) -> None:
        self._notif_queue.add(member)

    async def remove_from_notif_queue(self, member: MemberHandle) -> None:
        self._notif_queue.discard(member)

    async def _notify_subscribers(self) -> None:
        if not self._notif_queue:
            return
        subscribers = list(self._notif_queue)
        self._notif_queue.clear()
        logger.info("Queue %s opened, notifying %d subscribers", self._name, len(subscribers))
        await self._send_all(subscribers, f'The "{self._name}" queue is now open!')

    async def _send_all(self, recipients: Iterable[MemberHandle], text: str) -> None:
        """Send ``text`` to every recipient; individual failures are logged and dropped."""
        recipients = list(recipients)
        if not recipients:
            return
        results = await asyncio.gather(
            *(self._messenger.send(recipient, text) for recipient in recipients),
            return_exceptions=True,
        )
        for recipient, result in zip(recipients, results):
            if isinstance(result, Exception):
                logger.warning(
                    "Failed to send direct message to %s: %s",
                    recipient.display_name,
                    result,
                )
