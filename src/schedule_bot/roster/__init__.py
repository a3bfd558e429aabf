"""Committed-participant roster stored in Event Message text."""

from schedule_bot.roster.codec import decode, encode, read_roster, rewrite_roster
from schedule_bot.roster.context import RosterContext, build_roster_context
from schedule_bot.roster.handlers import ToggleOutcome, handle_commit, handle_uncommit
from schedule_bot.roster.locks import MessageLocks

__all__ = [
    "build_roster_context",
    "decode",
    "encode",
    "handle_commit",
    "handle_uncommit",
    "MessageLocks",
    "read_roster",
    "rewrite_roster",
    "RosterContext",
    "ToggleOutcome",
]
