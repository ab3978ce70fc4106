"""Tests for the Slack adapters."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from help_queue.adapters.slack import (
    SlackDirectMessenger,
    SlackDisplaySurface,
    SlackMember,
    SlackMemberDirectory,
    build_blocks,
    to_mrkdwn,
)
from help_queue.domain.entities import DisplayArtifact
from help_queue.services.display import build_controls


@pytest.fixture
def mock_slack_client():
    """Create a mock AsyncWebClient."""
    client = AsyncMock()
    client.auth_test = AsyncMock(return_value={"user_id": "U_BOT", "bot_id": "B_BOT"})
    client.chat_postMessage = AsyncMock(return_value={"ok": True, "ts": "1700000000.000100"})
    client.pins_add = AsyncMock(return_value={"ok": True})
    client.chat_update = AsyncMock(return_value={"ok": True})
    client.chat_delete = AsyncMock(return_value={"ok": True})
    client.pins_list = AsyncMock(return_value={"ok": True, "items": []})
    client.conversations_open = AsyncMock(return_value={"ok": True, "channel": {"id": "D_ALICE"}})
    client.users_info = AsyncMock(
        return_value={
            "ok": True,
            "user": {"id": "U_ALICE", "name": "alice.w", "profile": {"display_name": "alice"}},
        }
    )
    return client


class TestBuildBlocks:
    """Tests for Block Kit rendering."""

    def test_open_queue_shows_join_and_leave(self):
        blocks = build_blocks("The queue is **OPEN**.", build_controls("algo-help", True))

        assert blocks[0] == {
            "type": "section",
            "text": {"type": "mrkdwn", "text": "The queue is *OPEN*."},
        }
        assert len(blocks) == 2
        buttons = blocks[1]["elements"]
        assert [b["action_id"] for b in buttons] == ["join algo-help", "leave algo-help"]
        assert buttons[0]["style"] == "primary"
        assert buttons[1]["style"] == "danger"
        assert buttons[0]["text"]["text"] == "✅ Join Queue"

    def test_closed_queue_shows_notification_buttons(self):
        blocks = build_blocks("closed", build_controls("algo-help", False))

        assert len(blocks) == 2
        buttons = blocks[1]["elements"]
        assert [b["action_id"] for b in buttons] == ["notif algo-help", "removeN algo-help"]
        assert "style" not in buttons[0]

    def test_to_mrkdwn(self):
        assert to_mrkdwn("**CLOSED**") == "*CLOSED*"


class TestSlackDisplaySurface:
    """Tests for SlackDisplaySurface."""

    @pytest.mark.asyncio
    async def test_create_posts_and_pins(self, mock_slack_client):
        surface = SlackDisplaySurface(mock_slack_client, "C_QUEUE")

        artifact = await surface.create("hello", build_controls("algo-help", False))

        assert artifact == DisplayArtifact(channel_id="C_QUEUE", message_id="1700000000.000100")
        kwargs = mock_slack_client.chat_postMessage.await_args.kwargs
        assert kwargs["channel"] == "C_QUEUE"
        assert kwargs["text"] == "hello"
        mock_slack_client.pins_add.assert_awaited_once_with(
            channel="C_QUEUE", timestamp="1700000000.000100"
        )

    @pytest.mark.asyncio
    async def test_create_deletes_message_when_pin_fails(self, mock_slack_client):
        response = MagicMock()
        response.__getitem__.side_effect = {"error": "missing_scope"}.__getitem__
        mock_slack_client.pins_add = AsyncMock(side_effect=SlackApiError("missing_scope", response))
        surface = SlackDisplaySurface(mock_slack_client, "C_QUEUE")

        with pytest.raises(SlackApiError):
            await surface.create("hello", build_controls("algo-help", False))

        mock_slack_client.chat_delete.assert_awaited_once_with(
            channel="C_QUEUE", ts="1700000000.000100"
        )

    @pytest.mark.asyncio
    async def test_edit_updates_message(self, mock_slack_client):
        surface = SlackDisplaySurface(mock_slack_client, "C_QUEUE")
        artifact = DisplayArtifact(channel_id="C_QUEUE", message_id="1.0")

        await surface.edit(artifact, "**OPEN**", build_controls("algo-help", True))

        kwargs = mock_slack_client.chat_update.await_args.kwargs
        assert kwargs["channel"] == "C_QUEUE"
        assert kwargs["ts"] == "1.0"
        assert kwargs["text"] == "*OPEN*"

    @pytest.mark.asyncio
    async def test_list_published_only_returns_bot_messages(self, mock_slack_client):
        mock_slack_client.pins_list = AsyncMock(
            return_value={
                "ok": True,
                "items": [
                    {"type": "message", "message": {"ts": "1.0", "user": "U_BOT"}},
                    {"type": "message", "message": {"ts": "2.0", "user": "U_ALICE"}},
                    {"type": "file", "file": {"id": "F1"}},
                    {"type": "message", "message": {"ts": "3.0", "user": "U_BOT"}},
                ],
            }
        )
        surface = SlackDisplaySurface(mock_slack_client, "C_QUEUE")

        artifacts = await surface.list_published()
        await surface.list_published()

        assert [a.message_id for a in artifacts] == ["1.0", "3.0"]
        mock_slack_client.auth_test.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete(self, mock_slack_client):
        surface = SlackDisplaySurface(mock_slack_client, "C_QUEUE")

        await surface.delete(DisplayArtifact(channel_id="C_QUEUE", message_id="1.0"))

        mock_slack_client.chat_delete.assert_awaited_once_with(channel="C_QUEUE", ts="1.0")


class TestSlackDirectMessenger:
    """Tests for SlackDirectMessenger."""

    @pytest.mark.asyncio
    async def test_send_opens_dm(self, mock_slack_client):
        messenger = SlackDirectMessenger(mock_slack_client)

        await messenger.send(SlackMember("U_ALICE", "alice"), "hi")

        mock_slack_client.conversations_open.assert_awaited_once_with(users="U_ALICE")
        mock_slack_client.chat_postMessage.assert_awaited_once_with(channel="D_ALICE", text="hi")


class TestSlackMemberDirectory:
    """Tests for SlackMemberDirectory."""

    @pytest.mark.asyncio
    async def test_resolve_caches_handle(self, mock_slack_client):
        directory = SlackMemberDirectory(mock_slack_client)

        first = await directory.resolve("U_ALICE")
        second = await directory.resolve("U_ALICE")

        assert first is second
        assert first.display_name == "alice"
        assert first.mention == "<@U_ALICE>"
        mock_slack_client.users_info.assert_awaited_once_with(user="U_ALICE")

    @pytest.mark.asyncio
    async def test_resolve_falls_back_to_user_id(self, mock_slack_client):
        response = MagicMock()
        response.__getitem__.side_effect = {"error": "user_not_found"}.__getitem__
        mock_slack_client.users_info = AsyncMock(
            side_effect=SlackApiError("user_not_found", response)
        )
        directory = SlackMemberDirectory(mock_slack_client)

        member = await directory.resolve("U_GHOST")

        assert member.display_name == "U_GHOST"
