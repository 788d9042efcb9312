"""Per-record mutual exclusion for read-modify-write cycles."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class RecordLockRegistry:
    """
    Hands out one asyncio.Lock per record id.

    All writers of a record (chunk append, local delete, the upload saga) hold
    the record's lock for their whole read-modify-save cycle. A lock lives only
    while someone holds or waits for it, so the registry stays as small as the
    number of records currently being written.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def lock_for(self, record_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(record_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[record_id] = lock
        self._users[record_id] = self._users.get(record_id, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._users[record_id] -= 1
            if self._users[record_id] == 0:
                del self._users[record_id]
                del self._locks[record_id]

    def __len__(self) -> int:
        return len(self._locks)
