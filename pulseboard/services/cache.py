"""In-memory TTL cache for provider responses."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, TypeVar

T = TypeVar("T")


@dataclass
class CachedEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache:
    """Per-key expiring store with a size bound. Only successful loads are cached.

    Concurrent misses on one key share a single in-flight load.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 4096) -> None:
        self._store: Dict[Hashable, CachedEntry[Any]] = {}
        self._inflight: Dict[Hashable, asyncio.Future[Any]] = {}
        self._clock = clock
        self._max_entries = max_entries

    def get(self, key: Hashable) -> Any | None:
        cached = self._store.get(key)
        if not cached:
            return None
        if self._clock() >= cached.expires_at:
            self._store.pop(key, None)
            return None
        return cached.value

    def set(self, key: Hashable, value: Any, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            return
        self._store.pop(key, None)
        if len(self._store) >= self._max_entries:
            self.sweep()
        # oldest insertions go first once nothing has expired
        while len(self._store) >= self._max_entries:
            self._store.pop(next(iter(self._store)))
        self._store[key] = CachedEntry(value=value, expires_at=self._clock() + ttl_seconds)

    def sweep(self) -> int:
        """Drop every expired entry and return how many were removed."""

        now = self._clock()
        expired = [key for key, entry in self._store.items() if now >= entry.expires_at]
        for key in expired:
            del self._store[key]
        return len(expired)

    async def get_or_load(self, key: Hashable, ttl_seconds: float, loader: Callable[[], Awaitable[T]]) -> T:
        cached = self.get(key)
        if cached is not None:
            return cached
        pending = self._inflight.get(key)
        if pending is not None:
            return await asyncio.shield(pending)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await loader()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # mark retrieved; waiters re-raise it themselves
            future.exception()
            raise
        else:
            future.set_result(value)
            self.set(key, value, ttl_seconds)
            return value
        finally:
            self._inflight.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


__all__ = ["TTLCache"]
