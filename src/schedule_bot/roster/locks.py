"""Per-message asyncio locks.

Slack offers no conditional update, so two toggles on the same Event Message
handled concurrently would each read the roster, and the later write would
drop the earlier one's change. Holding a lock keyed by (channel, ts) across
fetch -> rewrite -> update serializes toggles within this process. Entries
are removed once no task holds or waits on them.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class MessageLocks:
    """Registry of locks keyed by (channel_id, message_ts)."""

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._users: dict[tuple[str, str], int] = {}

    @asynccontextmanager
    async def hold(self, channel_id: str, ts: str) -> AsyncIterator[None]:
        key = (channel_id, ts)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
