"""Daily schedule posting: one Event Message per workout.

Each workout card is created with an empty roster line and an ``HC``
button; from then on the roster handlers own the card's roster line.
"""

import asyncio
import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from slack_sdk.web.async_client import AsyncWebClient

from schedule_bot.config import Settings
from schedule_bot.models.slack import COMMIT_ACTION_ID, COMMITS_BLOCK_ID
from schedule_bot.models.workout import CalendarLinks, Workout
from schedule_bot.roster.codec import encode
from schedule_bot.schedule.gloomschedule import GloomScheduleClient
from schedule_bot.schedule.workouts import select_workouts, tomorrow_date
from schedule_bot.slack.notifier import send_admin_dm

logger = logging.getLogger(__name__)

HEADER_TEXT = "*Tomorrow's Schedule:*"


def workout_line(workout: Workout) -> str:
    """``*0530*: The Yard [🏃] - Hamhock - Central Park``"""
    parts = [f"*{workout.start}*: {workout.ao}"]
    if workout.types:
        parts.append(f"[{workout.types}]")
    line = " ".join(parts) + f" - {workout.the_q}"
    if workout.location:
        line += f" - {workout.location}"
    return line


def build_workout_card(workout: Workout) -> list[dict]:
    """Block Kit layout for one workout's Event Message."""
    if workout.is_closed:
        return [
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"{workout.ao} [❌] - CLOSED"},
            }
        ]

    return [
        {
            "type": "section",
            "block_id": COMMITS_BLOCK_ID,
            "text": {
                "type": "mrkdwn",
                "text": f"{workout_line(workout)}\n{encode([])}",
            },
            "accessory": {
                "type": "button",
                "text": {"type": "plain_text", "text": "HC"},
                "style": "primary",
                "action_id": COMMIT_ACTION_ID,
                "value": workout.model_dump_json(include={"ao", "start", "the_q", "location", "types"}),
            },
        }
    ]


async def post_workout_schedule(
    client: AsyncWebClient,
    channel_id: str,
    workouts: list[Workout],
    links: CalendarLinks | None = None,
) -> list[dict]:
    """Post header, one message per workout, and an optional calendar footer.

    Returns one record per posted message. Raises SlackApiError on the first
    failed post.
    """
    logger.info("Posting schedule to channel %s", channel_id)
    results: list[dict] = []

    header = await client.chat_postMessage(
        channel=channel_id,
        text="Tomorrow's Schedule",
        unfurl_links=False,
        unfurl_media=False,
        blocks=[{"type": "section", "text": {"type": "mrkdwn", "text": HEADER_TEXT}}],
    )
    results.append({"type": "header", "ts": header["ts"]})

    for workout in workouts:
        response = await client.chat_postMessage(
            channel=channel_id,
            text=f"{workout.start}: {workout.ao} - {workout.the_q}",
            unfurl_links=False,
            unfurl_media=False,
            blocks=build_workout_card(workout),
        )
        results.append({"type": "workout", "ts": response["ts"], "ao": workout.ao, "time": workout.start})

    if links and (links.google or links.ical):
        footer = await client.chat_postMessage(
            channel=channel_id,
            text="Subscribe to the calendar",
            unfurl_links=False,
            unfurl_media=False,
            blocks=[
                {
                    "type": "context",
                    "elements": [
                        {
                            "type": "mrkdwn",
                            "text": f"Subscribe to the calendar: <{links.google}|Google> | <{links.ical}|iCal>",
                        }
                    ],
                }
            ],
        )
        results.append({"type": "footer", "ts": footer["ts"]})

    logger.info("Posted %d messages", len(results))
    return results


def _missing_settings(settings: Settings) -> list[str]:
    required = {
        "gs_api_key": settings.gs_api_key,
        "gs_api_endpoint": settings.gs_api_endpoint,
        "calendar_google_link": settings.calendar_google_link,
        "calendar_ical_link": settings.calendar_ical_link,
        "schedule_channel_id": settings.schedule_channel_id,
        "schedule_admin_user_id": settings.schedule_admin_user_id,
        "schedule_timezone": settings.schedule_timezone,
    }
    return [name for name, value in required.items() if not value]


def _failure_time(tz_name: str) -> str:
    """Timestamp for the failure DM, in UTC when the configured zone is unusable."""
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc
    return datetime.now(tz).strftime("%Y-%m-%d %H:%M %Z")


def _included_types(settings: Settings) -> set[str]:
    flags = {"1stF": settings.include_1stf, "2ndF": settings.include_2ndf, "3rdF": settings.include_3rdf}
    return {name for name, enabled in flags.items() if enabled}


async def post_tomorrows_schedule(
    settings: Settings,
    client: AsyncWebClient,
    schedule_client: GloomScheduleClient | None = None,
) -> dict:
    """Fetch tomorrow's workouts from GloomSchedule and post them to Slack.

    The admin is DMed about unknown workout types and about any failure.
    An empty schedule posts nothing.

    Returns:
        Dict with ``success`` and counts, or ``success: False`` and ``error``.

    Raises:
        ValueError: If required settings are missing.
    """
    missing = _missing_settings(settings)
    if missing:
        raise ValueError(f"Missing required settings: {', '.join(missing)}")

    owns_client = schedule_client is None
    if schedule_client is None:
        schedule_client = GloomScheduleClient(settings.gs_api_key, settings.gs_api_endpoint)

    try:
        date_str = tomorrow_date(settings.schedule_timezone)
        logger.info("Fetching schedule for %s", date_str)

        events, aos = await asyncio.gather(
            schedule_client.get_scheduled_qs(date_str),
            schedule_client.get_ao_details(active_only=True),
        )
        workouts, unknown_types = select_workouts(events, aos, date_str, _included_types(settings))

        if not workouts:
            logger.info("No workouts found for %s", date_str)
            return {"success": True, "count": 0, "message": "No workouts scheduled"}

        if unknown_types:
            await send_admin_dm(
                client,
                settings.schedule_admin_user_id,
                "⚠️ *Unknown Workout Types Detected*\n\n"
                + "\n".join(f"• {name}" for name in unknown_types)
                + "\n\nPlease add these types to the emoji mapping in schedule_bot/schedule/workouts.py",
            )

        links = CalendarLinks(google=settings.calendar_google_link, ical=settings.calendar_ical_link)
        posted = await post_workout_schedule(client, settings.schedule_channel_id, workouts, links)

        logger.info(
            "Schedule posted",
            extra={"date": date_str, "workouts": len(workouts), "messages": len(posted)},
        )
        return {
            "success": True,
            "count": len(workouts),
            "messages": len(posted),
            "unknown_types": len(unknown_types),
        }

    except Exception as exc:
        logger.error("Schedule post failed", exc_info=True)
        now = _failure_time(settings.schedule_timezone)
        await send_admin_dm(
            client,
            settings.schedule_admin_user_id,
            f"❌ *Schedule Post Failed*\n\n*Error:* {exc}\n*Time:* {now}\n\nCheck server logs for details.",
        )
        return {"success": False, "error": str(exc)}

    finally:
        if owns_client:
            await schedule_client.aclose()
