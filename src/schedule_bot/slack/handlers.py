"""Slack interaction dispatch."""

import logging

from fastapi import BackgroundTasks
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from schedule_bot.models.slack import CommitInteraction, UncommitInteraction, parse_interaction
from schedule_bot.roster.context import RosterContext
from schedule_bot.roster.handlers import handle_commit, handle_uncommit

logger = logging.getLogger(__name__)


def handle_interaction(
    payload: dict, background_tasks: BackgroundTasks, ctx: RosterContext
) -> JSONResponse:
    """Acknowledge an interaction and schedule the matching roster handler.

    Slack expects a 200 within 3 seconds, so the handler runs as a
    background task after the response is sent. Malformed or unrelated
    payloads are acknowledged and dropped.
    """
    try:
        interaction = parse_interaction(payload)
    except ValidationError as exc:
        logger.warning("Malformed interaction payload: %s", exc.errors(include_url=False))
        return JSONResponse({"ok": True})

    if isinstance(interaction, CommitInteraction):
        logger.info("commit_event received from user=%s", interaction.user_id)
        background_tasks.add_task(handle_commit, interaction, ctx)
    elif isinstance(interaction, UncommitInteraction):
        logger.info("uncommit_event received from user=%s", interaction.user_id)
        background_tasks.add_task(handle_uncommit, interaction, ctx)

    return JSONResponse({"ok": True})
