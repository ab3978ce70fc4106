from __future__ import annotations

from .slack import (
    SlackDirectMessenger,
    SlackDisplaySurface,
    SlackMember,
    SlackMemberDirectory,
)

__all__ = [
    "SlackDirectMessenger",
    "SlackDisplaySurface",
    "SlackMember",
    "SlackMemberDirectory",
]
