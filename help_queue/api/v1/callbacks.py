"""Slack interactivity callback.

Slack posts button clicks as ``application/x-www-form-urlencoded`` with a
single ``payload`` field holding JSON. Replies go to the payload's
``response_url`` as ephemeral messages.

Docs:
- https://api.slack.com/interactivity/handling
- https://api.slack.com/authentication/verifying-requests-from-slack
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from slack_sdk.signature import SignatureVerifier
from slack_sdk.webhook.async_client import AsyncWebhookClient

from help_queue.api.deps import get_member_directory, get_queue_manager
from help_queue.core.config import settings
from help_queue.exceptions import UserError
from help_queue.services.actions import handle_queue_action
from help_queue.services.queue_manager import QueueManager

router = APIRouter(prefix="/callbacks", tags=["callbacks"])
logger = logging.getLogger(__name__)


def slack_verify_request(body: bytes, headers: Any, signing_secret: str) -> bool:
    """Verify the X-Slack-Signature header. Verification is skipped without a secret."""
    if not signing_secret:
        return True
    verifier = SignatureVerifier(signing_secret)
    return verifier.is_valid_request(body, dict(headers))


def slack_parse_interaction(body: bytes) -> dict:
    form = parse_qs(body.decode("utf-8"))
    raw = (form.get("payload") or [""])[0]
    if not raw:
        raise HTTPException(status_code=400, detail="Missing payload")
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid payload")


async def _reply_ephemeral(response_url: Optional[str], text: str) -> None:
    if not response_url:
        return
    try:
        webhook = AsyncWebhookClient(response_url)
        await webhook.send(text=text, response_type="ephemeral", replace_original=False)
    except Exception as e:
        logger.warning(f"[SLACK] Failed to send ephemeral reply: {e}")


@router.post("/slack/interactions")
async def slack_interactions(
    request: Request,
    manager: QueueManager = Depends(get_queue_manager),
    directory=Depends(get_member_directory),
):
    body = await request.body()
    if not slack_verify_request(body, request.headers, settings.slack_signing_secret):
        raise HTTPException(status_code=401, detail="Invalid Slack signature")

    payload = slack_parse_interaction(body)
    if payload.get("type") != "block_actions":
        return Response(status_code=200)

    user_id = (payload.get("user") or {}).get("id")
    if not user_id:
        raise HTTPException(status_code=400, detail="Missing user")
    member = await directory.resolve(user_id)
    response_url = payload.get("response_url")

    for action in payload.get("actions") or []:
        action_id = action.get("action_id") or ""
        try:
            text = await handle_queue_action(manager, action_id, member)
        except UserError as e:
            text = e.message
        await _reply_ephemeral(response_url, text)

    return Response(status_code=200)
