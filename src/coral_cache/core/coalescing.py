from __future__ import annotations

import asyncio
import time
import typing as t

from .hooks import NULL_OBSERVER, CacheObserver
from .models import CacheEntry, Expiring

K = t.TypeVar("K", bound=t.Hashable)
T = t.TypeVar("T")
V = t.TypeVar("V", bound=Expiring)

Clock = t.Callable[[], float]


class PendingLoads(t.Generic[K, T]):
    """In-flight loads keyed by request identity, at most one per key.

    Checking for a pending load and registering a new one happen under a lock
    owned by this instance, so two callers can never both start a load for the
    same key. Each load runs as its own task and drops its key when it
    settles, on success and on failure alike.
    """

    def __init__(self) -> None:
        self._pending: t.Dict[K, "asyncio.Task[T]"] = {}
        self._lock = asyncio.Lock()

    def __contains__(self, key: object) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def keys(self) -> t.List[K]:
        return list(self._pending)

    async def join(self, key: K, load: t.Callable[[], t.Awaitable[T]]) -> t.Tuple["asyncio.Task[T]", bool]:
        """Return the task loading ``key``, starting ``load`` if there is none.

        The second element is True when this call started the load.
        """
        async with self._lock:
            task = self._pending.get(key)
            if task is not None:
                return task, False
            task = asyncio.get_running_loop().create_task(self._settle(key, load))
            task.add_done_callback(_retrieve_exception)
            self._pending[key] = task
            return task, True

    async def run(self, key: K, load: t.Callable[[], t.Awaitable[T]]) -> T:
        task, _ = await self.join(key, load)
        return await wait_shared(task)

    async def _settle(self, key: K, load: t.Callable[[], t.Awaitable[T]]) -> T:
        try:
            return await load()
        finally:
            self._pending.pop(key, None)


def _retrieve_exception(task: "asyncio.Task[t.Any]") -> None:
    # Every waiter may have been cancelled before the load failed.
    if not task.cancelled():
        task.exception()


async def wait_shared(task: "asyncio.Task[T]") -> T:
    # A caller giving up must not cancel the load the other callers share.
    return await asyncio.shield(task)


class CoalescingCache(t.Generic[K, V]):
    """TTL cache that runs at most one loader call per key at a time.

    Values carry their own ``created_at``/``expires_at``. A value is served
    while ``now < expires_at``; after that the next ``get`` reloads it, and
    every caller arriving during the reload shares that one result, value or
    exception. Failures are never stored.

    Usage:
        cache = CoalescingCache(load_user)
        user = await cache.get(token)
    """

    def __init__(
        self,
        loader: t.Callable[[K], t.Awaitable[V]],
        *,
        clock: Clock = time.time,
        observer: t.Optional[CacheObserver] = None,
    ) -> None:
        self._loader = loader
        self._clock = clock
        self._observer = observer or NULL_OBSERVER
        self._entries: t.Dict[K, CacheEntry[V]] = {}
        self._pending: PendingLoads[K, V] = PendingLoads()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def get(self, key: K) -> V:
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            self._observer.on_hit(key)
            return entry.value

        task, started = await self._pending.join(key, lambda: self._load(key))
        if started:
            self._observer.on_miss(key)
        else:
            self._observer.on_coalesced(key)
        return await wait_shared(task)

    def peek(self, key: K) -> t.Optional[CacheEntry[V]]:
        """Return the stored entry for ``key``, fresh or not, without loading."""
        return self._entries.get(key)

    def is_loading(self, key: K) -> bool:
        return key in self._pending

    async def _load(self, key: K) -> V:
        started = time.perf_counter()
        try:
            value = await self._loader(key)
        except Exception as exc:
            self._observer.on_load_failed(key, exc)
            raise
        self._entries[key] = CacheEntry(value, created_at=value.created_at, expires_at=value.expires_at)
        self._observer.on_loaded(key, time.perf_counter() - started)
        return value
