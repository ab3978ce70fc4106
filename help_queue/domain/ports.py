"""Port interfaces (protocols) for dependency injection.

The queue core only talks to the chat platform through these protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from help_queue.domain.entities import ControlRow, DisplayArtifact

if TYPE_CHECKING:
    from help_queue.services.help_queue import HelpQueue


class MemberHandle(Protocol):
    """Opaque reference to a platform user. Compared by identity."""

    @property
    def id(self) -> str:
        ...

    @property
    def display_name(self) -> str:
        ...

    @property
    def mention(self) -> str:
        """Platform markup that pings the member, e.g. ``<@U123>``."""
        ...


class DisplaySurface(Protocol):
    """Protocol for the channel that shows a queue's published message."""

    async def create(self, content: str, controls: Sequence[ControlRow]) -> DisplayArtifact:
        """Post and pin a new message, return its handle."""
        ...

    async def edit(
        self,
        artifact: DisplayArtifact,
        content: str,
        controls: Sequence[ControlRow],
    ) -> None:
        """Replace the content of an existing message. May raise."""
        ...

    async def list_published(self) -> list[DisplayArtifact]:
        """List pinned messages authored by this bot."""
        ...

    async def delete(self, artifact: DisplayArtifact) -> None:
        """Delete a published message."""
        ...


class DirectMessenger(Protocol):
    """Protocol for best-effort direct messages to a member."""

    async def send(self, member: MemberHandle, text: str) -> None:
        ...


class MemberState(Protocol):
    """Per-member bookkeeping token handed out by the registry."""

    member: MemberHandle

    def try_add_to_queue(self, queue: HelpQueue) -> None:
        ...

    def try_remove_from_queue(self, queue: HelpQueue) -> None:
        ...


class MemberStateRegistry(Protocol):
    """Protocol for the registry that tracks which queue a member waits in."""

    def get_or_create_state(self, member: MemberHandle) -> MemberState:
        ...

    def get_state(self, member: MemberHandle) -> Optional[MemberState]:
        ...
