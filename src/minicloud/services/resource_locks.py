"""Per-resource-key mutual exclusion with automatic registry cleanup.

Each key maps to an entry holding an ``asyncio.Lock`` and a reference count.
The count is raised before a caller starts waiting and lowered when it
releases, so an entry is only evicted once nobody holds or waits on it.
Registry mutations happen under a ``threading.Lock`` and never await.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass(eq=False)
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    refs: int = 0


@dataclass(frozen=True, eq=False)
class LockHandle:
    """Proof of acquisition returned by ``acquire`` and consumed by ``release``."""

    key: str
    entry: _LockEntry


class ResourceLockRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, _LockEntry] = {}
        self._mutex = threading.Lock()

    def __len__(self) -> int:
        with self._mutex:
            return len(self._entries)

    def active_keys(self) -> list[str]:
        with self._mutex:
            return sorted(self._entries)

    async def acquire(self, key: str) -> LockHandle:
        """Wait until the lock for ``key`` is free and take it."""
        with self._mutex:
            entry = self._entries.get(key)
            if entry is None:
                entry = _LockEntry()
                self._entries[key] = entry
            entry.refs += 1

        try:
            await entry.lock.acquire()
        except BaseException:
            self._unref(key, entry)
            raise
        return LockHandle(key=key, entry=entry)

    def release(self, handle: LockHandle) -> None:
        handle.entry.lock.release()
        self._unref(handle.key, handle.entry)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[LockHandle]:
        handle = await self.acquire(key)
        try:
            yield handle
        finally:
            self.release(handle)

    def _unref(self, key: str, entry: _LockEntry) -> None:
        with self._mutex:
            entry.refs -= 1
            # Compare-and-remove: only the same, unused entry is evicted.
            if entry.refs == 0 and self._entries.get(key) is entry:
                del self._entries[key]


def resource_key(kind: str, namespace: str, name: str) -> str:
    return f"{kind}:{namespace}/{name}"
