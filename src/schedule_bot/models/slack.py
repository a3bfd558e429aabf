"""Slack interaction payload models.

Slack delivers button clicks as ``block_actions`` payloads whose shape varies
with where the button lives (a channel message vs. an ephemeral notice).
These models validate the raw body once at the boundary and narrow it into
one of two interaction shapes the roster handlers understand.
"""

import json
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

COMMIT_ACTION_ID = "commit_event"
UNCOMMIT_ACTION_ID = "uncommit_event"
COMMITS_BLOCK_ID = "commits"


class SlackUser(BaseModel):
    id: str


class SlackChannel(BaseModel):
    id: str


class SlackMessage(BaseModel):
    """A chat message as returned by Slack (interaction body or history API)."""

    model_config = ConfigDict(extra="allow")

    ts: str
    text: str = ""
    blocks: list[dict] = Field(default_factory=list)
    metadata: dict | None = None


class BlockAction(BaseModel):
    """One element of ``payload.actions`` (the button that was pressed)."""

    action_id: str
    block_id: str | None = None
    value: str | None = None  # opaque string round-tripped through the button


class BlockActionsPayload(BaseModel):
    """Raw ``block_actions`` interaction body, with only the fields we read."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["block_actions"]
    user: SlackUser
    channel: SlackChannel | None = None
    message: SlackMessage | None = None
    container: dict = Field(default_factory=dict)
    actions: list[BlockAction] = Field(default_factory=list)


class ActionPayload(BaseModel):
    """Locates an Event Message from a control that does not live on it.

    Serialized as compact JSON into the Uncommit button's ``value``.
    """

    channel: str | None = None
    ts: str | None = None

    def to_value(self) -> str:
        return json.dumps({"channel": self.channel, "ts": self.ts}, separators=(",", ":"))

    @classmethod
    def from_value(cls, value: str | None) -> "ActionPayload":
        """Parse a button value, returning an empty payload when it is missing or garbled."""
        if not value:
            return cls()
        try:
            return cls.model_validate_json(value)
        except ValidationError:
            return cls()


class CommitInteraction(BaseModel):
    """User pressed the commit button on an Event Message."""

    kind: Literal["commit"] = "commit"
    user_id: str
    channel_id: str
    message: SlackMessage  # the Event Message as displayed when clicked

    @property
    def message_ts(self) -> str:
        return self.message.ts


class UncommitInteraction(BaseModel):
    """User pressed Uncommit on their private confirmation notice."""

    kind: Literal["uncommit"] = "uncommit"
    user_id: str
    target: ActionPayload
    context_channel_id: str | None = None
    context_message: SlackMessage | None = None  # usually the ephemeral notice, not the event


def parse_interaction(payload: dict) -> CommitInteraction | UncommitInteraction | None:
    """Narrow a raw interaction body to a roster interaction.

    Returns None for payload types and action IDs this bot does not handle.
    Raises ValidationError when a roster action is missing required fields.
    """
    if payload.get("type") != "block_actions":
        return None

    body = BlockActionsPayload.model_validate(payload)
    if not body.actions:
        return None
    action = body.actions[0]
    channel_id = body.channel.id if body.channel else body.container.get("channel_id")

    if action.action_id == COMMIT_ACTION_ID:
        return CommitInteraction.model_validate(
            {"user_id": body.user.id, "channel_id": channel_id, "message": body.message}
        )

    if action.action_id == UNCOMMIT_ACTION_ID:
        return UncommitInteraction(
            user_id=body.user.id,
            target=ActionPayload.from_value(action.value),
            context_channel_id=channel_id,
            context_message=body.message,
        )

    return None
