"""Event Message read/write primitives over the Slack Web API."""

import copy
import logging
import time

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from schedule_bot.models.slack import COMMITS_BLOCK_ID, SlackMessage

logger = logging.getLogger(__name__)

COMMIT_UPDATE_EVENT_TYPE = "commit_update"

_last_marker: int = 0


def next_update_marker() -> int:
    """Return a millisecond timestamp strictly greater than any previously returned."""
    global _last_marker
    _last_marker = max(time.time_ns() // 1_000_000, _last_marker + 1)
    return _last_marker


async def fetch_message(client: AsyncWebClient, channel_id: str, ts: str) -> SlackMessage | None:
    """Fetch the current copy of a channel message.

    Returns None when the history API is unavailable (e.g. missing
    ``channels:history`` scope) or the message is gone; callers then fall
    back to the content carried by the interaction.
    """
    try:
        response = await client.conversations_history(
            channel=channel_id,
            latest=ts,
            inclusive=True,
            limit=1,
            include_all_metadata=True,
        )
    except SlackApiError as exc:
        error_code = exc.response.get("error", "") if exc.response else ""
        logger.warning(
            "conversations.history failed for %s:%s (%s), using interaction content",
            channel_id,
            ts,
            error_code,
        )
        return None

    messages = response.get("messages") or []
    if not messages or messages[0].get("ts") != ts:
        logger.warning("Message %s:%s not found in history", channel_id, ts)
        return None
    return SlackMessage.model_validate(messages[0])


def find_commits_block(blocks: list[dict]) -> int | None:
    """Index of the section block carrying the roster, or None."""
    for index, block in enumerate(blocks):
        if block.get("block_id") == COMMITS_BLOCK_ID:
            return index
    return None


def block_text(block: dict) -> str:
    text = block.get("text") or {}
    return text.get("text") or ""


def replace_block_text(blocks: list[dict], index: int, text: str) -> list[dict]:
    """Return a deep copy of ``blocks`` with block ``index``'s mrkdwn text replaced."""
    new_blocks = copy.deepcopy(blocks)
    block = new_blocks[index]
    block.setdefault("text", {"type": "mrkdwn"})["text"] = text
    return new_blocks


async def update_message(
    client: AsyncWebClient,
    channel_id: str,
    ts: str,
    *,
    text: str,
    blocks: list[dict],
    user_id: str,
) -> None:
    """Overwrite the full message content. Slack has no partial update.

    The ``updated_at`` marker in the message metadata changes on every
    write so clients re-render even when the text is nearly identical.
    Raises SlackApiError on failure.
    """
    await client.chat_update(
        channel=channel_id,
        ts=ts,
        text=text or "Event update",
        blocks=blocks,
        metadata={
            "event_type": COMMIT_UPDATE_EVENT_TYPE,
            "event_payload": {
                "updated_at": next_update_marker(),
                "user_id": user_id,
            },
        },
    )
