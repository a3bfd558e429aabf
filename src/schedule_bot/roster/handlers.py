"""Commit and uncommit interaction handlers.

Each handler runs fetch -> decode -> mutate -> encode -> overwrite under the
per-message lock, then tells the acting user what happened with an ephemeral
notice. The chat message is the only store: nothing is remembered between
interactions.

Known limitation: the lock only spans this process. Two bot processes
toggling the same message at the same moment can still lose one update.
"""

import logging
from enum import Enum

from schedule_bot.models.roster import Roster
from schedule_bot.models.slack import (
    ActionPayload,
    CommitInteraction,
    SlackMessage,
    UncommitInteraction,
)
from schedule_bot.roster.codec import read_roster, rewrite_roster
from schedule_bot.roster.context import RosterContext
from schedule_bot.slack.messages import (
    block_text,
    fetch_message,
    find_commits_block,
    replace_block_text,
    update_message,
)
from schedule_bot.slack.notifier import post_ephemeral, uncommit_blocks

logger = logging.getLogger(__name__)


class ToggleOutcome(str, Enum):
    """Result of one commit/uncommit attempt."""

    COMMITTED = "committed"
    UNCOMMITTED = "uncommitted"
    ALREADY_COMMITTED = "already_committed"
    NOT_COMMITTED = "not_committed"
    DENIED = "denied"
    MESSAGE_NOT_FOUND = "message_not_found"
    NO_ROSTER = "no_roster"


NOTICES: dict[ToggleOutcome, str] = {
    ToggleOutcome.COMMITTED: "You committed to this event!",
    ToggleOutcome.UNCOMMITTED: "You have been uncommitted from this event.",
    ToggleOutcome.ALREADY_COMMITTED: "You are already committed to this event.",
    ToggleOutcome.NOT_COMMITTED: "You are not committed to this event.",
    ToggleOutcome.DENIED: "Sorry, this account can't commit to events.",
    ToggleOutcome.MESSAGE_NOT_FOUND: "Could not locate the event message.",
    ToggleOutcome.NO_ROSTER: "No commit list found on the message.",
}

# Outcomes whose notice carries an Uncommit button
_OFFERS_UNCOMMIT = {ToggleOutcome.COMMITTED, ToggleOutcome.ALREADY_COMMITTED}


async def handle_commit(interaction: CommitInteraction, ctx: RosterContext) -> None:
    """Add the acting user to the Event Message's roster.

    Never raises: any failure is logged and the user gets no confirmation.
    """
    channel_id = interaction.channel_id
    ts = interaction.message_ts
    user_id = interaction.user_id
    try:
        outcome = await commit(interaction, ctx)
    except Exception:
        logger.error(
            "Commit failed",
            extra={"channel_id": channel_id, "ts": ts, "user_id": user_id},
            exc_info=True,
        )
        return
    await _notify(ctx, channel_id, user_id, outcome, ActionPayload(channel=channel_id, ts=ts))


async def handle_uncommit(interaction: UncommitInteraction, ctx: RosterContext) -> None:
    """Remove the acting user from the roster of the message named by the Action Payload.

    Never raises: any failure is logged and the user gets no confirmation.
    """
    channel_id, ts = _resolve_target(interaction)
    user_id = interaction.user_id
    try:
        outcome = await uncommit(interaction, ctx)
    except Exception:
        logger.error(
            "Uncommit failed",
            extra={"channel_id": channel_id, "ts": ts, "user_id": user_id},
            exc_info=True,
        )
        return

    if channel_id is None:
        logger.warning("No channel to notify %s in", user_id)
        return
    await _notify(ctx, channel_id, user_id, outcome, ActionPayload(channel=channel_id, ts=ts))


async def commit(interaction: CommitInteraction, ctx: RosterContext) -> ToggleOutcome:
    """Apply a commit and persist it. Raises SlackApiError if the update fails."""
    channel_id = interaction.channel_id
    ts = interaction.message_ts
    user_id = interaction.user_id

    if ctx.is_denied(user_id):
        return ToggleOutcome.DENIED

    async with ctx.locks.hold(channel_id, ts):
        message = await fetch_message(ctx.client, channel_id, ts) or interaction.message
        index = find_commits_block(message.blocks)
        if index is None:
            logger.warning("Commits block not found", extra={"channel_id": channel_id, "ts": ts})
            return ToggleOutcome.NO_ROSTER

        roster = read_roster(block_text(message.blocks[index]))
        if user_id in roster:
            return ToggleOutcome.ALREADY_COMMITTED

        updated = roster.without(ctx.denied_users).add(user_id)
        await _persist(ctx, channel_id, message, index, updated, user_id)

    logger.info(
        "User committed",
        extra={"channel_id": channel_id, "ts": ts, "user_id": user_id, "roster_size": len(updated)},
    )
    return ToggleOutcome.COMMITTED


async def uncommit(interaction: UncommitInteraction, ctx: RosterContext) -> ToggleOutcome:
    """Apply an uncommit and persist it. Raises SlackApiError if the update fails."""
    channel_id, ts = _resolve_target(interaction)
    user_id = interaction.user_id
    if channel_id is None or ts is None:
        logger.warning("Uncommit payload does not identify a message", extra={"user_id": user_id})
        return ToggleOutcome.MESSAGE_NOT_FOUND

    async with ctx.locks.hold(channel_id, ts):
        message = await fetch_message(ctx.client, channel_id, ts) or _context_copy(interaction, ts)
        if message is None:
            return ToggleOutcome.MESSAGE_NOT_FOUND

        index = find_commits_block(message.blocks)
        if index is None:
            return ToggleOutcome.NO_ROSTER

        roster = read_roster(block_text(message.blocks[index]))
        if user_id not in roster:
            return ToggleOutcome.NOT_COMMITTED

        updated = roster.remove(user_id).without(ctx.denied_users)
        await _persist(ctx, channel_id, message, index, updated, user_id)

    logger.info(
        "User uncommitted",
        extra={"channel_id": channel_id, "ts": ts, "user_id": user_id, "roster_size": len(updated)},
    )
    return ToggleOutcome.UNCOMMITTED


def _resolve_target(interaction: UncommitInteraction) -> tuple[str | None, str | None]:
    """(channel, ts) of the Event Message, preferring the Action Payload over the click context."""
    channel_id = interaction.target.channel or interaction.context_channel_id
    ts = interaction.target.ts
    if ts is None and interaction.context_message is not None:
        ts = interaction.context_message.ts
    return channel_id, ts


def _context_copy(interaction: UncommitInteraction, ts: str) -> SlackMessage | None:
    """The interaction's message, but only if it is the Event Message itself."""
    message = interaction.context_message
    if message is not None and message.ts == ts:
        return message
    return None


async def _persist(
    ctx: RosterContext,
    channel_id: str,
    message: SlackMessage,
    index: int,
    roster: Roster,
    user_id: str,
) -> None:
    new_text = rewrite_roster(block_text(message.blocks[index]), roster)
    blocks = replace_block_text(message.blocks, index, new_text)
    await update_message(
        ctx.client,
        channel_id,
        message.ts,
        text=message.text,
        blocks=blocks,
        user_id=user_id,
    )


async def _notify(
    ctx: RosterContext,
    channel_id: str,
    user_id: str,
    outcome: ToggleOutcome,
    payload: ActionPayload,
) -> None:
    text = NOTICES[outcome]
    blocks = uncommit_blocks(text, payload) if outcome in _OFFERS_UNCOMMIT else None
    await post_ephemeral(ctx.client, channel_id, user_id, text, blocks=blocks)
