from __future__ import annotations

import typing as t


class CacheObserver:
    """Hook points called by the caches on every state transition.

    All methods are no-ops; subclasses override what they need. Hooks are called
    synchronously from inside the cache and must not raise.
    """

    # Outer cache
    def on_hit(self, key: t.Any) -> None:
        pass

    def on_miss(self, key: t.Any) -> None:
        pass

    def on_coalesced(self, key: t.Any) -> None:
        pass

    def on_loaded(self, key: t.Any, duration: float) -> None:
        pass

    def on_load_failed(self, key: t.Any, exc: BaseException) -> None:
        pass

    # Per-field refresh
    def on_field_fresh(self, owner: str, field: str) -> None:
        pass

    def on_field_refresh(self, owner: str, field: str) -> None:
        pass

    def on_field_refreshed(self, owner: str, field: str, duration: float) -> None:
        pass

    def on_field_refresh_failed(self, owner: str, field: str, exc: BaseException) -> None:
        pass


NULL_OBSERVER = CacheObserver()
