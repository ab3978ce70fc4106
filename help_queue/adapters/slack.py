"""Slack adapters for the help queue.

Implements the display surface, direct messaging and member lookup ports on
top of slack_sdk's AsyncWebClient.

Docs:
- chat.postMessage: https://api.slack.com/methods/chat.postMessage
- chat.update: https://api.slack.com/methods/chat.update
- pins.list: https://api.slack.com/methods/pins.list
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from help_queue.domain.entities import ControlRow, ControlStyle, DisplayArtifact

logger = logging.getLogger(__name__)

# Slack buttons only know "primary" (green) and "danger" (red); anything else is default
_SLACK_BUTTON_STYLES = {
    ControlStyle.SUCCESS: "primary",
    ControlStyle.DANGER: "danger",
}


def to_mrkdwn(content: str) -> str:
    """Convert markdown bold (``**x**``) to Slack mrkdwn bold (``*x*``)."""
    return content.replace("**", "*")


def build_blocks(content: str, controls: Sequence[ControlRow]) -> list[dict[str, Any]]:
    """Build Block Kit blocks for a queue message.

    Slack buttons cannot be disabled, so disabled controls are left out and a
    row without any enabled control is dropped.
    """
    blocks: list[dict[str, Any]] = [
        {"type": "section", "text": {"type": "mrkdwn", "text": to_mrkdwn(content)}},
    ]
    for row in controls:
        elements = []
        for control in row.controls:
            if not control.enabled:
                continue
            button: dict[str, Any] = {
                "type": "button",
                "action_id": control.action_id,
                "value": control.action_id,
                "text": {
                    "type": "plain_text",
                    "text": f"{control.emoji} {control.label}",
                    "emoji": True,
                },
            }
            style = _SLACK_BUTTON_STYLES.get(control.style)
            if style:
                button["style"] = style
            elements.append(button)
        if elements:
            blocks.append({"type": "actions", "elements": elements})
    return blocks


class SlackMember:
    """A Slack user. Instances are shared per user id by SlackMemberDirectory."""

    def __init__(self, user_id: str, display_name: str) -> None:
        self.id = user_id
        self.display_name = display_name

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    def __repr__(self) -> str:
        return f"SlackMember(id={self.id!r}, display_name={self.display_name!r})"


class SlackMemberDirectory:
    """Resolves Slack user ids to SlackMember handles.

    The same user id always yields the same object, so handles can be
    compared by identity.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client
        self._members: dict[str, SlackMember] = {}

    async def resolve(self, user_id: str) -> SlackMember:
        member = self._members.get(user_id)
        if member is not None:
            return member

        display_name = user_id
        try:
            response = await self._client.users_info(user=user_id)
            user = response.get("user") or {}
            profile = user.get("profile") or {}
            display_name = (
                profile.get("display_name")
                or user.get("name")
                or profile.get("real_name")
                or user_id
            )
        except SlackApiError as e:
            logger.warning(f"[SLACK] Failed to get user info for {user_id}: {e.response['error']}")

        # Another resolve may have finished while we awaited users_info
        member = self._members.setdefault(user_id, SlackMember(user_id, display_name))
        return member


class SlackDisplaySurface:
    """Pinned queue message in one Slack channel."""

    def __init__(self, client: AsyncWebClient, channel_id: str) -> None:
        self._client = client
        self.channel_id = channel_id
        self._bot_user_id: Optional[str] = None

    async def _get_bot_user_id(self) -> str:
        if self._bot_user_id is None:
            response = await self._client.auth_test()
            self._bot_user_id = response["user_id"]
        return self._bot_user_id

    async def create(self, content: str, controls: Sequence[ControlRow]) -> DisplayArtifact:
        response = await self._client.chat_postMessage(
            channel=self.channel_id,
            text=to_mrkdwn(content),
            blocks=build_blocks(content, controls),
        )
        ts = response["ts"]
        try:
            await self._client.pins_add(channel=self.channel_id, timestamp=ts)
        except SlackApiError as e:
            # An unpinned message is invisible to list_published; remove it
            logger.error(f"[SLACK] Failed to pin queue message {ts}: {e.response['error']}")
            try:
                await self._client.chat_delete(channel=self.channel_id, ts=ts)
            except SlackApiError as delete_error:
                logger.warning(
                    f"[SLACK] Failed to delete unpinned message {ts}: "
                    f"{delete_error.response['error']}"
                )
            raise
        logger.info(f"[SLACK] Queue message {ts} posted and pinned in {self.channel_id}")
        return DisplayArtifact(channel_id=self.channel_id, message_id=ts)

    async def edit(
        self,
        artifact: DisplayArtifact,
        content: str,
        controls: Sequence[ControlRow],
    ) -> None:
        await self._client.chat_update(
            channel=artifact.channel_id,
            ts=artifact.message_id,
            text=to_mrkdwn(content),
            blocks=build_blocks(content, controls),
        )

    async def list_published(self) -> list[DisplayArtifact]:
        bot_user_id = await self._get_bot_user_id()
        response = await self._client.pins_list(channel=self.channel_id)
        artifacts = []
        for item in response.get("items") or []:
            message = item.get("message") or {}
            if item.get("type") != "message" or message.get("user") != bot_user_id:
                continue
            artifacts.append(DisplayArtifact(channel_id=self.channel_id, message_id=message["ts"]))
        return artifacts

    async def delete(self, artifact: DisplayArtifact) -> None:
        await self._client.chat_delete(channel=artifact.channel_id, ts=artifact.message_id)
        logger.info(f"[SLACK] Deleted queue message {artifact.message_id} in {artifact.channel_id}")


class SlackDirectMessenger:
    """Sends direct messages to Slack users."""

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def send(self, member: SlackMember, text: str) -> None:
        response = await self._client.conversations_open(users=member.id)
        channel_id = (response.get("channel") or {}).get("id") or member.id
        await self._client.chat_postMessage(channel=channel_id, text=text)
        logger.debug(f"[SLACK] Direct message sent to {member.id}")
