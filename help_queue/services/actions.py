"""Routes interactive control activations to queue operations.

Control action ids have the form ``"<verb> <queue name>"``, see
``help_queue.services.display.build_controls``.
"""
from __future__ import annotations

import logging

from help_queue.domain.entities import QueueAction
from help_queue.domain.ports import MemberHandle
from help_queue.exceptions import QueueClosedError, UnknownActionError
from help_queue.services.queue_manager import QueueManager

logger = logging.getLogger(__name__)


def parse_action_id(action_id: str) -> tuple[QueueAction, str]:
    """Split an action id into its verb and queue name.

    Raises:
        UnknownActionError: If the id has no queue name or an unknown verb.
    """
    verb, _, queue_name = action_id.partition(" ")
    if not queue_name:
        raise UnknownActionError(action_id)
    try:
        return QueueAction(verb), queue_name
    except ValueError:
        raise UnknownActionError(action_id) from None


async def handle_queue_action(
    manager: QueueManager,
    action_id: str,
    member: MemberHandle,
) -> str:
    """Apply a control activation for ``member`` and return a confirmation text.

    Raises:
        UserError: For unknown actions or queues, joining a closed queue, or
            joining while already waiting in a queue.
    """
    action, queue_name = parse_action_id(action_id)
    queue = manager.get(queue_name)
    logger.info("Action %s on %s by %s", action.value, queue_name, member.display_name)

    if action is QueueAction.JOIN:
        if not queue.is_open:
            raise QueueClosedError(queue_name)
        await queue.enqueue(member)
        return f'You joined the "{queue_name}" queue.'

    if action is QueueAction.LEAVE:
        if not queue.is_member(member):
            return f'You are not in the "{queue_name}" queue.'
        await queue.remove(member)
        return f'You left the "{queue_name}" queue.'

    if action is QueueAction.NOTIFY:
        await queue.add_to_notif_queue(member)
        return f'You will be notified when the "{queue_name}" queue opens.'

    await queue.remove_from_notif_queue(member)
    return f'You will no longer be notified about the "{queue_name}" queue.'
