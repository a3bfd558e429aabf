"""Roster value: the ordered set of users committed to one event."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict


def mention(user_id: str) -> str:
    """Render a Slack user ID as a mention token, e.g. ``<@U123>``."""
    return f"<@{user_id}>"


class Roster(BaseModel):
    """Immutable, duplicate-free, insertion-ordered list of Slack user IDs.

    Every mutation returns a new Roster; callers never edit one in place.
    """

    model_config = ConfigDict(frozen=True)

    user_ids: tuple[str, ...] = ()

    @classmethod
    def of(cls, user_ids: Iterable[str]) -> "Roster":
        """Build a roster, keeping the first occurrence of each ID."""
        return cls(user_ids=tuple(dict.fromkeys(user_ids)))

    @property
    def mentions(self) -> list[str]:
        return [mention(user_id) for user_id in self.user_ids]

    def add(self, user_id: str) -> "Roster":
        """Append a user at the end. No-op if already present."""
        if user_id in self.user_ids:
            return self
        return Roster(user_ids=(*self.user_ids, user_id))

    def remove(self, user_id: str) -> "Roster":
        return Roster(user_ids=tuple(uid for uid in self.user_ids if uid != user_id))

    def without(self, denied: Iterable[str]) -> "Roster":
        """Drop every user in ``denied``, preserving order of the rest."""
        denied = set(denied)
        return Roster(user_ids=tuple(uid for uid in self.user_ids if uid not in denied))

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.user_ids

    def __len__(self) -> int:
        return len(self.user_ids)
