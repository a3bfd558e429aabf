"""Async Slack client singleton.

One AsyncWebClient per process, shared by the roster context built in the
app lifespan and by the schedule poster.
"""

from slack_sdk.web.async_client import AsyncWebClient

from schedule_bot.config import get_settings

_client: AsyncWebClient | None = None


async def get_slack_client() -> AsyncWebClient:
    """Return the cached client, creating it from ``slack_bot_token`` on first use."""
    global _client
    if _client is None:
        _client = AsyncWebClient(token=get_settings().slack_bot_token)
    return _client


def reset_client() -> None:
    """Drop the cached client. Used for testing."""
    global _client
    _client = None
