"""Per-session asyncio locks for serializing read-modify-write turns."""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager


class SessionLocks:
    """One lock per session id, created on first use.

    Locks are never evicted; sessions are never deleted either.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def hold(self, session_id: str):
        """Hold the session's lock for the duration of the block."""
        async with self._locks[session_id]:
            yield

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._locks
