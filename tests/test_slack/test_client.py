"""Tests for the shared Slack client."""

from unittest.mock import MagicMock, patch

import pytest
from slack_sdk.web.async_client import AsyncWebClient

from schedule_bot.slack.client import get_slack_client, reset_client


@pytest.fixture(autouse=True)
def _fresh_client():
    reset_client()
    yield
    reset_client()


@pytest.fixture()
def bot_token():
    settings = MagicMock()
    settings.slack_bot_token = "xoxb-schedule"
    with patch("schedule_bot.slack.client.get_settings", return_value=settings):
        yield settings.slack_bot_token


@pytest.mark.asyncio
async def test_client_uses_bot_token(bot_token: str):
    client = await get_slack_client()

    assert isinstance(client, AsyncWebClient)
    assert client.token == bot_token


@pytest.mark.asyncio
async def test_client_is_shared(bot_token: str):
    assert await get_slack_client() is await get_slack_client()


@pytest.mark.asyncio
async def test_reset_creates_new_client(bot_token: str):
    first = await get_slack_client()
    reset_client()
    assert await get_slack_client() is not first
