"""Slack notices for roster interactions and scheduler alerts.

All functions are fire-and-forget: they catch and log errors but never raise,
so a failed notice cannot undo or abort a roster change that already landed.
"""

import logging

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from schedule_bot.models.slack import UNCOMMIT_ACTION_ID, ActionPayload

logger = logging.getLogger(__name__)


def uncommit_blocks(text: str, payload: ActionPayload) -> list[dict]:
    """Blocks for a private notice offering an Uncommit button.

    The button value carries ``payload`` so the follow-up interaction can
    locate the Event Message, which is not the message the button lives on.
    """
    return [
        {"type": "section", "text": {"type": "mrkdwn", "text": text}},
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "Uncommit"},
                    "style": "danger",
                    "action_id": UNCOMMIT_ACTION_ID,
                    "value": payload.to_value(),
                }
            ],
        },
    ]


async def post_ephemeral(
    client: AsyncWebClient,
    channel_id: str,
    user_id: str,
    text: str,
    blocks: list[dict] | None = None,
) -> None:
    """Post a notice only ``user_id`` can see.

    Args:
        client: Slack Web API client.
        channel_id: Channel the notice appears in.
        user_id: The only user who will see it.
        text: Fallback text (and the whole notice when no blocks are given).
        blocks: Optional Block Kit layout.
    """
    kwargs: dict = {"channel": channel_id, "user": user_id, "text": text}
    if blocks is not None:
        kwargs["blocks"] = blocks
    try:
        await client.chat_postEphemeral(**kwargs)
    except SlackApiError as exc:
        error_code = exc.response.get("error", "") if exc.response else ""
        logger.warning(
            "Failed to post ephemeral notice to %s in %s: %s",
            user_id,
            channel_id,
            error_code,
            exc_info=True,
        )


async def send_admin_dm(client: AsyncWebClient, user_id: str, text: str) -> None:
    """Send a direct message to the schedule admin."""
    try:
        await client.chat_postMessage(channel=user_id, text=text)
        logger.info("Sent admin DM to %s", user_id)
    except SlackApiError:
        logger.error("Failed to send admin DM to %s", user_id, exc_info=True)
