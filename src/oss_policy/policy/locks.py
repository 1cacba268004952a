"""Policy – per-bucket exclusive sections for read-modify-write sequences."""
from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, Awaitable, Callable, TypeVar

T = TypeVar("T")


class BucketLocks:
    """One :class:`asyncio.Lock` per bucket name, created on first use.

    Serializes writers inside a single process and event loop only.  A bucket's
    entry is dropped once its last holder or waiter leaves :meth:`exclusive`.

    Usage::

        locks = BucketLocks()
        async with locks.exclusive("docs"):
            ...  # read, compute, write
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, bucket: object) -> bool:
        return bucket in self._locks

    def lock_for(self, bucket: str) -> asyncio.Lock:
        lock = self._locks.get(bucket)
        if lock is None:
            lock = self._locks[bucket] = asyncio.Lock()
        return lock

    def locked(self, bucket: str) -> bool:
        lock = self._locks.get(bucket)
        return lock is not None and lock.locked()

    @contextlib.asynccontextmanager
    async def exclusive(self, bucket: str) -> AsyncIterator[None]:
        lock = self.lock_for(bucket)
        self._users[bucket] = self._users.get(bucket, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[bucket] -= 1
            if not self._users[bucket]:
                del self._users[bucket]
                if self._locks.get(bucket) is lock:
                    del self._locks[bucket]

    async def run(self, bucket: str, func: Callable[[], Awaitable[T]]) -> T:
        """Await ``func()`` while holding the lock for *bucket*."""
        async with self.exclusive(bucket):
            return await func()


__all__ = ["BucketLocks"]
