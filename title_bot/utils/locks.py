from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class ChatLocks:
    """One asyncio lock per chat id; entries are dropped once nobody waits on them."""

    def __init__(self) -> None:
        self._locks: Dict[int, asyncio.Lock] = {}
        self._waiters: Dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, chat_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(chat_id, asyncio.Lock())
        self._waiters[chat_id] = self._waiters.get(chat_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[chat_id] -= 1
            if not self._waiters[chat_id]:
                self._waiters.pop(chat_id, None)
                self._locks.pop(chat_id, None)

    def __len__(self) -> int:
        return len(self._locks)
