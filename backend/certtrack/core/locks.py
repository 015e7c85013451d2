"""
Per-store write serialization.

Repositories are created per request, so the lock has to live on the class.
One asyncio.Lock is kept per running event loop.
"""

import asyncio
import weakref


class StoreLock:
    """Lazily creates one asyncio.Lock per event loop"""

    def __init__(self, name: str):
        self.name = name
        self._locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
            weakref.WeakKeyDictionary()
        )

    def get(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        lock = self._locks.get(loop)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[loop] = lock
        return lock

    async def __aenter__(self):
        await self.get().acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.get().release()
        return False
