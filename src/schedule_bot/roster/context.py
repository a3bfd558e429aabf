"""Process-wide collaborators for the roster handlers."""

from dataclasses import dataclass, field

from slack_sdk.web.async_client import AsyncWebClient

from schedule_bot.config import Settings
from schedule_bot.roster.locks import MessageLocks


@dataclass
class RosterContext:
    """Built once at startup and passed into every commit/uncommit handler."""

    client: AsyncWebClient
    denied_users: frozenset[str] = frozenset()
    locks: MessageLocks = field(default_factory=MessageLocks)

    def is_denied(self, user_id: str) -> bool:
        return user_id in self.denied_users


def build_roster_context(settings: Settings, client: AsyncWebClient) -> RosterContext:
    """Create the handler context from settings. The deny-list is fixed for the process lifetime."""
    return RosterContext(client=client, denied_users=settings.denied_users)
