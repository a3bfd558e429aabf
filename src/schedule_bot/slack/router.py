"""Slack interactivity router with signature verification."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from schedule_bot.roster.context import RosterContext
from schedule_bot.slack.handlers import handle_interaction
from schedule_bot.slack.verification import verify_slack_interaction

router = APIRouter(prefix="", tags=["slack"])


def get_roster_context(request: Request) -> RosterContext:
    """Roster context built in the app lifespan."""
    return request.app.state.roster_context


@router.post("/slack/interactions")
async def slack_interactions(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: dict = Depends(verify_slack_interaction),
    ctx: RosterContext = Depends(get_roster_context),
) -> JSONResponse:
    """Receive button clicks from Event Messages and confirmation notices.

    Slack retries (X-Slack-Retry-Num header) are acknowledged immediately
    so a slow first attempt does not toggle the roster twice.
    """
    if request.headers.get("X-Slack-Retry-Num"):
        return JSONResponse({"ok": True})

    return handle_interaction(payload, background_tasks, ctx)
