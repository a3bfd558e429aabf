"""Slack integration: Web API client, message primitives, and notices.

The interactivity router lives in ``schedule_bot.slack.router`` and is
imported by the app directly.
"""

from schedule_bot.slack.client import get_slack_client, reset_client
from schedule_bot.slack.messages import fetch_message, update_message
from schedule_bot.slack.notifier import post_ephemeral, send_admin_dm, uncommit_blocks

__all__ = [
    "fetch_message",
    "get_slack_client",
    "post_ephemeral",
    "reset_client",
    "send_admin_dm",
    "uncommit_blocks",
    "update_message",
]
