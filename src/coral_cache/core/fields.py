from __future__ import annotations

import time
import typing as t

from .coalescing import Clock, PendingLoads
from .hooks import NULL_OBSERVER, CacheObserver
from .models import FieldState

F = t.TypeVar("F")

RefreshCallback = t.Callable[[], t.Awaitable[F]]


class FieldUpdatePolicy(t.Generic[F]):
    """One independently refreshed field with its own TTL.

    ``get()`` refreshes the value when it is older than ``ttl`` and returns the
    stored value. Concurrent getters share one refresh; a failed refresh
    leaves ``last_updated`` untouched so the next access retries.
    """

    def __init__(
        self,
        name: str,
        ttl: float,
        refresh: RefreshCallback[F],
        value: t.Optional[F] = None,
        *,
        last_updated: t.Optional[float] = None,
        owner: str = "",
        clock: Clock = time.time,
        observer: t.Optional[CacheObserver] = None,
    ) -> None:
        self.name = name
        self.owner = owner
        self.state: FieldState[F] = FieldState(value=value, ttl=ttl, last_updated=last_updated)
        self._refresh = refresh
        self._clock = clock
        self._observer = observer or NULL_OBSERVER
        self._pending: PendingLoads[str, F] = PendingLoads()

    @property
    def value(self) -> t.Optional[F]:
        return self.state.value

    @property
    def last_updated(self) -> t.Optional[float]:
        return self.state.last_updated

    @property
    def ttl(self) -> float:
        return self.state.ttl

    def is_fresh(self) -> bool:
        return self.state.is_fresh(self._clock())

    def is_refreshing(self) -> bool:
        return self.name in self._pending

    async def update(self) -> None:
        if self.is_fresh():
            self._observer.on_field_fresh(self.owner, self.name)
            return
        await self._pending.run(self.name, self._run_refresh)

    async def get(self) -> F:
        await self.update()
        return t.cast(F, self.state.value)

    async def _run_refresh(self) -> F:
        self._observer.on_field_refresh(self.owner, self.name)
        started = time.perf_counter()
        try:
            value = await self._refresh()
        except Exception as exc:
            self._observer.on_field_refresh_failed(self.owner, self.name, exc)
            raise
        self.state.value = value
        self.state.last_updated = self._clock()
        self._observer.on_field_refreshed(self.owner, self.name, time.perf_counter() - started)
        return value
