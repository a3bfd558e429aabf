"""Data models for the roster, Slack interactions, and the workout schedule."""

from schedule_bot.models.roster import Roster, mention
from schedule_bot.models.slack import (
    ActionPayload,
    CommitInteraction,
    SlackMessage,
    UncommitInteraction,
    parse_interaction,
)
from schedule_bot.models.workout import AODetails, CalendarLinks, ScheduledEvent, ScheduledQ, Workout

__all__ = [
    "ActionPayload",
    "AODetails",
    "CalendarLinks",
    "CommitInteraction",
    "mention",
    "parse_interaction",
    "Roster",
    "ScheduledEvent",
    "ScheduledQ",
    "SlackMessage",
    "UncommitInteraction",
    "Workout",
]
