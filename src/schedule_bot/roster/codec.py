"""Roster line codec: reads and writes the committed list embedded in message text.

An Event Message's section text looks like::

    *0530*: The Yard [🏃] - Hamhock - Central Park
    *Committed:* <@U1> <@U2> (2)

The roster line is the only durable record of who committed, so the reader
accepts every format older messages in channel history may carry:

- current:        ``*Committed:* <@U1> <@U2> (2)``
- no count:       ``*Committed:* <@U1> <@U2>``
- label on its own line, mentions on the next line(s)
- labelled mentions: ``<@U1|bob>``

The writer only ever emits the current format, so any rewrite migrates an
old message forward.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from schedule_bot.models.roster import Roster

ROSTER_LABEL = "*Committed:*"
EMPTY_SENTINEL = "None yet"

# <@U123> or <@U123|display-name>
MENTION_PATTERN = re.compile(r"<@([A-Z0-9]+)(?:\|[^>]*)?>")

# A line holding only mentions and an optional "(N)" count
_CONTINUATION_LINE = re.compile(r"^\s*(?:<@[A-Z0-9]+(?:\|[^>]*)?>\s*)+(?:\(\d+\))?\s*$")


@dataclass(frozen=True)
class RosterSpan:
    """Location of the roster within a message's lines."""

    start: int  # index of the line carrying the label
    end: int  # exclusive; > start + 1 only for the legacy line-break format
    prefix: str  # text on the label line before the label, kept on rewrite


def find_roster_span(lines: Sequence[str]) -> RosterSpan | None:
    """Locate the first roster label. Returns None if the message has none."""
    for index, line in enumerate(lines):
        pos = line.find(ROSTER_LABEL)
        if pos == -1:
            continue
        end = index + 1
        if not line[pos + len(ROSTER_LABEL):].strip():
            while end < len(lines) and _CONTINUATION_LINE.match(lines[end]):
                end += 1
        return RosterSpan(start=index, end=end, prefix=line[:pos])
    return None


def decode(text: str) -> list[str]:
    """Extract the ordered, de-duplicated mention tokens from a roster line.

    Mentions are normalized to ``<@U123>``. A message without a roster
    label decodes to an empty list.
    """
    lines = text.split("\n")
    span = find_roster_span(lines)
    if span is None:
        return []

    segment = "\n".join(lines[span.start:span.end])
    segment = segment[len(span.prefix) + len(ROSTER_LABEL):]

    user_ids = [match.group(1) for match in MENTION_PATTERN.finditer(segment)]
    return Roster.of(user_ids).mentions


def encode(mentions: Sequence[str]) -> str:
    """Render mention tokens as a current-format roster line."""
    if not mentions:
        return f"{ROSTER_LABEL} {EMPTY_SENTINEL}"
    return f"{ROSTER_LABEL} {' '.join(mentions)} ({len(mentions)})"


def read_roster(text: str) -> Roster:
    """Decode a message's text into a Roster of user IDs."""
    return Roster.of(MENTION_PATTERN.match(token).group(1) for token in decode(text))


def rewrite_roster(text: str, roster: Roster) -> str:
    """Replace the roster line in ``text`` with the encoding of ``roster``.

    All other lines are returned unchanged. If the text has no roster line
    one is appended.
    """
    lines = text.split("\n")
    span = find_roster_span(lines)
    line = encode(roster.mentions)

    if span is None:
        if not text:
            return line
        return "\n".join([*lines, line])

    lines[span.start:span.end] = [span.prefix + line]
    return "\n".join(lines)
