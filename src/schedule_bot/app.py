"""FastAPI application with lifespan, health, and scheduler endpoints."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request

from schedule_bot.config import get_settings
from schedule_bot.logging_config import configure_logging
from schedule_bot.roster.context import build_roster_context
from schedule_bot.schedule.poster import post_tomorrows_schedule
from schedule_bot.slack.client import get_slack_client
from schedule_bot.slack.router import router as slack_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and build the roster context once per process."""
    settings = get_settings()
    configure_logging(settings.log_level)
    client = await get_slack_client()
    app.state.settings = settings
    app.state.roster_context = build_roster_context(settings, client)
    if settings.denied_users:
        logger.info("Deny-list loaded", extra={"denied_count": len(settings.denied_users)})
    yield


app = FastAPI(
    title="Schedule Bot",
    lifespan=lifespan,
)
app.include_router(slack_router)


async def verify_scheduler(request: Request) -> None:
    """Verify the scheduler secret header for protected endpoints.

    Raises HTTPException 403 if the header is missing, empty, or mismatched.
    """
    settings = get_settings()
    secret = request.headers.get("X-Scheduler-Secret", "")
    if not settings.scheduler_secret or secret != settings.scheduler_secret:
        raise HTTPException(status_code=403, detail="Invalid scheduler secret")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "schedule-bot",
        "version": "0.1.0",
    }


@app.post("/schedule")
async def schedule_endpoint(_: None = Depends(verify_scheduler)):
    """Trigger the daily schedule post (called by the external cron)."""
    try:
        client = await get_slack_client()
        return await post_tomorrows_schedule(get_settings(), client)
    except Exception as exc:
        logger.error("Schedule endpoint failed", exc_info=True)
        return {"success": False, "error": str(exc)}
