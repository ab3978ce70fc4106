"""Pytest configuration and fixtures."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from help_queue.domain.entities import DisplayArtifact
from help_queue.services.display import QueueDisplayPublisher
from help_queue.services.help_queue import HelpQueue
from help_queue.services.member_state import MemberStateManager


class FakeMember:
    """Member handle compared by identity, like platform user objects."""

    def __init__(self, user_id: str, display_name: str | None = None) -> None:
        self.id = user_id
        self.display_name = display_name or user_id

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    def __repr__(self) -> str:
        return f"FakeMember({self.id!r})"


@pytest.fixture
def make_member():
    def _make(user_id: str, display_name: str | None = None) -> FakeMember:
        return FakeMember(user_id, display_name)

    return _make


@pytest.fixture
def alice():
    return FakeMember("U_ALICE", "alice")


@pytest.fixture
def bob():
    return FakeMember("U_BOB", "bob")


@pytest.fixture
def ta1():
    return FakeMember("U_TA1", "ta1")


@pytest.fixture
def ta2():
    return FakeMember("U_TA2", "ta2")


@pytest.fixture
def mock_surface():
    """Create a mock display surface with no published messages."""
    surface = AsyncMock()
    surface.create = AsyncMock(
        return_value=DisplayArtifact(channel_id="C_QUEUE", message_id="1700000000.000100")
    )
    surface.edit = AsyncMock(return_value=None)
    surface.list_published = AsyncMock(return_value=[])
    surface.delete = AsyncMock(return_value=None)
    return surface


@pytest.fixture
def mock_messenger():
    """Create a mock direct messenger."""
    messenger = AsyncMock()
    messenger.send = AsyncMock(return_value=None)
    return messenger


@pytest.fixture
def mock_publisher():
    """Create a mock display publisher."""
    publisher = MagicMock(spec=QueueDisplayPublisher)
    publisher.publish = AsyncMock(return_value=None)
    publisher.reconcile = AsyncMock(return_value=None)
    return publisher


@pytest.fixture
def member_state_manager():
    return MemberStateManager()


@pytest.fixture
def queue(mock_publisher, member_state_manager, mock_messenger):
    """An "algo-help" queue with a mocked display."""
    return HelpQueue(
        name="algo-help",
        display_publisher=mock_publisher,
        member_state_manager=member_state_manager,
        messenger=mock_messenger,
    )
