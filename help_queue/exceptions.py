"""Service exceptions.

Every exception carries a machine readable ``code``, a human readable ``message``
and optional ``details``. ``UserError`` subclasses describe invalid requests whose
message is safe to show back to the member who made them.
"""

from typing import Any, Dict, Optional


class HelpQueueServiceException(Exception):
    """Base exception for the help queue service."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class UserError(HelpQueueServiceException):
    """An invalid request made by a member; reported to them, never a crash."""


class EmptyQueueError(UserError):
    """Raised when dequeueing from a queue with no members."""

    def __init__(self, queue_name: str):
        super().__init__(
            code="QUEUE_EMPTY",
            message=f'The "{queue_name}" queue is empty',
            details={"queue": queue_name},
        )


class AlreadyQueuedError(UserError):
    """Raised when a member who already waits in a queue tries to join one."""

    def __init__(self, member_name: str, queue_name: str):
        super().__init__(
            code="MEMBER_CONFLICT",
            message=f'{member_name} is already in the "{queue_name}" queue',
            details={"member": member_name, "queue": queue_name},
        )


class QueueClosedError(UserError):
    """Raised when joining a queue that has no available helpers."""

    def __init__(self, queue_name: str):
        super().__init__(
            code="QUEUE_CLOSED",
            message=f'The "{queue_name}" queue is closed',
            details={"queue": queue_name},
        )


class QueueNotFoundError(UserError):
    """Raised when a queue name is not configured."""

    def __init__(self, queue_name: str):
        super().__init__(
            code="QUEUE_NOT_FOUND",
            message=f'There is no queue named "{queue_name}"',
            details={"queue": queue_name},
        )


class UnknownActionError(UserError):
    """Raised when an interactive control id cannot be routed."""

    def __init__(self, action_id: str):
        super().__init__(
            code="VALIDATION_ERROR",
            message=f"Unknown queue action '{action_id}'",
            details={"action_id": action_id},
        )
